"""
Unit tests for ledger snapshot persistence.
"""

import json
import os
import tempfile

import pytest

from movieledger.registry.exceptions import CorruptLedger, DuplicateRating
from movieledger.registry.movie_ledger import MovieLedger
from movieledger.utils.storage import LedgerStorage


def build_ledger():
    ledger = MovieLedger(owner="deployer")
    ledger.add_movie("deployer", "The Father")
    ledger.add_movie("deployer", "Tom & Jerry")
    ledger.rate_movie("deployer", 1, 4, "happy and blessed")
    ledger.rate_movie("user1", 2, 5, "funny")
    ledger.rate_movie("user2", 2, 3, "cute")
    return ledger


def write_snapshot(path, data):
    with open(path, 'w') as f:
        json.dump(data, f)


def test_load_missing_file_returns_none():
    with tempfile.TemporaryDirectory() as tmpdir:
        storage = LedgerStorage(os.path.join(tmpdir, "ledger.json"))

        assert not storage.exists()
        assert storage.load() is None


def test_save_and_load():
    """Restored ledger keeps ids, indexes and aggregates."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "nested", "ledger.json")
        storage = LedgerStorage(path)
        storage.save(build_ledger())

        restored = storage.load()

        assert restored.owner == "deployer"
        assert restored.get_movies_count() == 2
        assert restored.review_count == 3
        assert restored.total_ratings(2) == 2
        assert restored.total_scores(2) == 8
        assert restored.reviews(2, "user2").id == 3

        # Indexes survive the restart
        with pytest.raises(DuplicateRating):
            restored.rate_movie("user1", 2, 1)
        assert restored.rate_movie("user3", 1, 2) == 4

        # Replay emits nothing
        assert len(restored.notifications) == 1


def test_save_creates_backup():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "ledger.json")
        storage = LedgerStorage(path)
        ledger = build_ledger()

        storage.save(ledger)
        assert not os.path.exists(f"{path}.backup")

        ledger.add_movie("deployer", "Our Friend")
        storage.save(ledger)

        with open(f"{path}.backup") as f:
            assert len(json.load(f)["movies"]) == 2
        with open(path) as f:
            assert len(json.load(f)["movies"]) == 3
        assert not os.path.exists(f"{path}.tmp")


def test_corrupt_file_restores_from_backup():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "ledger.json")
        storage = LedgerStorage(path)
        ledger = build_ledger()
        storage.save(ledger)
        storage.save(ledger)

        with open(path, 'w') as f:
            f.write("{not json")

        restored = storage.load()
        assert restored.review_count == 3

        # Main file repaired from backup
        with open(path) as f:
            assert json.load(f)["owner"] == "deployer"


def test_corrupt_file_without_backup_raises():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "ledger.json")
        with open(path, 'w') as f:
            f.write("[]")

        with pytest.raises(CorruptLedger):
            LedgerStorage(path).load()


def test_inconsistent_aggregates_are_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "ledger.json")
        data = build_ledger().snapshot()
        data["movies"][1]["total_scores"] = 9
        write_snapshot(path, data)

        with pytest.raises(CorruptLedger, match="aggregates"):
            LedgerStorage(path).load()


@pytest.mark.parametrize("mutate", [
    lambda d: d["movies"][1].update(id=5),
    lambda d: d["movies"][1].update(name="The Father"),
    lambda d: d["reviews"][2].update(id=7),
    lambda d: d["reviews"][2].update(user="user1"),
    lambda d: d["reviews"][2].update(movie_id=3),
    lambda d: d["reviews"][2].update(score=6),
    lambda d: d.pop("owner"),
])
def test_invariant_violations_are_rejected(mutate):
    data = build_ledger().snapshot()
    mutate(data)

    with pytest.raises(CorruptLedger):
        MovieLedger.from_snapshot(data)


def test_undecodable_file_restores_from_backup():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "ledger.json")
        storage = LedgerStorage(path)
        ledger = build_ledger()
        storage.save(ledger)
        storage.save(ledger)

        with open(path, 'wb') as f:
            f.write(b"\xff\xfe{garbage")

        restored = storage.load()
        assert restored.review_count == 3
        assert restored.total_scores(2) == 8


def test_undecodable_file_without_backup_raises():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "ledger.json")
        with open(path, 'wb') as f:
            f.write(b"\xff\xfe{garbage")

        with pytest.raises(CorruptLedger):
            LedgerStorage(path).load()
