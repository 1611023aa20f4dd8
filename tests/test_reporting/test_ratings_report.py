"""
Unit tests for the ratings summary report.
"""

import json
import os
import tempfile

import pandas as pd
import pytest

from movieledger.registry.movie_ledger import MovieLedger
from movieledger.reporting import COLUMNS, RatingsReport


@pytest.fixture
def ledger():
    ledger = MovieLedger(owner="deployer")
    ledger.add_movie("deployer", "The Father")
    ledger.add_movie("deployer", "Tom & Jerry")
    ledger.add_movie("deployer", "Our Friend")
    ledger.rate_movie("deployer", 1, 4, "happy and blessed")
    ledger.rate_movie("user1", 2, 5, "funny")
    ledger.rate_movie("user2", 2, 4, "cute")
    return ledger


def test_dataframe_rows_follow_movie_ids(ledger):
    df = RatingsReport(ledger).to_dataframe()

    assert list(df.columns) == COLUMNS
    assert df['Id'].tolist() == [1, 2, 3]
    assert df['Movie'].tolist() == ["The Father", "Tom & Jerry", "Our Friend"]
    assert df['Total Ratings'].tolist() == [1, 2, 0]
    assert df['Total Scores'].tolist() == [4, 9, 0]


def test_average_is_truncated_and_na_when_unrated(ledger):
    df = RatingsReport(ledger).to_dataframe()

    assert df.loc[0, 'Average Score'] == 4
    assert df.loc[1, 'Average Score'] == 4  # 9 // 2
    assert pd.isna(df.loc[2, 'Average Score'])


def test_empty_ledger():
    df = RatingsReport(MovieLedger(owner="deployer")).to_dataframe()

    assert df.empty
    assert list(df.columns) == COLUMNS


def test_export_csv_writes_metadata(ledger):
    with tempfile.TemporaryDirectory() as tmpdir:
        output_path = RatingsReport(ledger).export_csv(tmpdir)

        assert output_path == os.path.join(tmpdir, "ratings_summary.csv")
        exported = pd.read_csv(output_path)
        assert exported['Movie'].tolist() == ["The Father", "Tom & Jerry", "Our Friend"]

        with open(os.path.join(tmpdir, "ratings_summary_metadata.json")) as f:
            metadata = json.load(f)
        assert metadata["movie_count"] == 3
        assert metadata["rated_movie_count"] == 2
        assert metadata["review_count"] == 3
