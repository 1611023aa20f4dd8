"""
Movie data model.

Represents a registered movie and its running rating aggregates.
"""

from dataclasses import dataclass


@dataclass
class Movie:
    """
    A movie in the ledger.
    Only the two aggregate counters change after registration.
    """
    id: int  # Sequential, starts at 1
    name: str  # Unique, case-sensitive
    total_ratings: int = 0  # Number of reviews received
    total_scores: int = 0  # Sum of all review scores

    def __post_init__(self):
        if not self.name:
            raise ValueError("Movie name must not be empty")

    def record_score(self, score: int) -> None:
        """Fold one accepted review score into the aggregates."""
        self.total_ratings += 1
        self.total_scores += score

    def view(self) -> "MovieView":
        """Immutable snapshot of the current movie state."""
        return MovieView(
            id=self.id,
            name=self.name,
            total_ratings=self.total_ratings,
            total_scores=self.total_scores
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Movie":
        """Create Movie from JSON dict."""
        return cls(
            id=data["id"],
            name=data["name"],
            total_ratings=data.get("total_ratings", 0),
            total_scores=data.get("total_scores", 0)
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "name": self.name,
            "total_ratings": self.total_ratings,
            "total_scores": self.total_scores
        }


@dataclass(frozen=True)
class MovieView:
    """Read-only movie shape returned to callers."""
    id: int
    name: str
    total_ratings: int
    total_scores: int
