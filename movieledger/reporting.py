"""
Ratings Report.

Tabulates every movie's aggregates into a summary table and exports it
as CSV with a metadata sidecar.
"""

import json
import logging
import os
from datetime import datetime

import pandas as pd

from movieledger.registry.movie_ledger import MovieLedger

logger = logging.getLogger(__name__)

COLUMNS = ['Id', 'Movie', 'Total Ratings', 'Total Scores', 'Average Score']
REPORT_NAME = "ratings_summary"


class RatingsReport:
    """
    Summary table over a ledger, one row per movie in id order.
    """

    def __init__(self, ledger: MovieLedger):
        """
        Args:
            ledger: Ledger to report on
        """
        self.ledger = ledger

    def to_dataframe(self) -> pd.DataFrame:
        """
        Build the summary table.

        Average Score uses the ledger's truncating integer average
        and is NA for movies without ratings.
        """
        rows = []
        for movie in self.ledger.iter_movies():
            if movie.total_ratings:
                average = movie.total_scores // movie.total_ratings
            else:
                average = pd.NA

            rows.append({
                'Id': movie.id,
                'Movie': movie.name,
                'Total Ratings': movie.total_ratings,
                'Total Scores': movie.total_scores,
                'Average Score': average
            })

        if not rows:
            logger.warning("No movies in ledger, creating empty summary")
            return pd.DataFrame(columns=COLUMNS)

        df = pd.DataFrame(rows, columns=COLUMNS)
        df['Average Score'] = df['Average Score'].astype('Int64')
        return df

    def export_csv(self, output_dir: str) -> str:
        """
        Write the summary CSV and its metadata JSON.

        Args:
            output_dir: Directory to save output

        Returns:
            Path to generated CSV file
        """
        df = self.to_dataframe()

        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, f"{REPORT_NAME}.csv")
        df.to_csv(output_path, index=False)

        rated = int((df['Total Ratings'] > 0).sum()) if not df.empty else 0
        logger.info(f"Summary saved to {output_path} ({len(df)} movies, {rated} rated)")

        metadata_path = os.path.join(output_dir, f"{REPORT_NAME}_metadata.json")
        metadata = {
            "movie_count": len(df),
            "rated_movie_count": rated,
            "review_count": self.ledger.review_count,
            "generated_at": datetime.utcnow().isoformat() + "Z"
        }
        with open(metadata_path, 'w') as f:
            json.dump(metadata, f, indent=2)

        logger.info(f"Metadata saved to {metadata_path}")

        return output_path
