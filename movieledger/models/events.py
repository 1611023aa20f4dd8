"""
Notification records emitted by the ledger.
"""

from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class MovieAdded:
    movie_id: int
    name: str

    event = "MovieAdded"

    def to_dict(self) -> dict:
        return {"event": self.event, **asdict(self)}


@dataclass(frozen=True)
class MovieRated:
    """
    Emitted after a review is accepted.
    Aggregates are the post-update values.
    """
    review_id: int
    movie_id: int
    user: str
    score: int
    text: str
    total_ratings: int
    total_scores: int

    event = "MovieRated"

    def to_dict(self) -> dict:
        return {"event": self.event, **asdict(self)}
