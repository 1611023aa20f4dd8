"""
Review data model.

Represents one user's rating of one movie.
"""

from dataclasses import dataclass

from config import settings


def is_valid_score(score) -> bool:
    """Scores are plain integers in the configured range (bools excluded)."""
    if isinstance(score, bool) or not isinstance(score, int):
        return False
    return settings.MIN_SCORE <= score <= settings.MAX_SCORE


@dataclass(frozen=True)
class Review:
    """
    A single accepted rating.
    Immutable once recorded.
    """
    id: int  # Unique across the whole ledger
    movie_id: int  # Movie being rated
    user: str  # Caller identity that submitted the review
    score: int  # 1-5
    text: str = ""  # Free-form, may be empty

    def __post_init__(self):
        # Validate score
        if not is_valid_score(self.score):
            raise ValueError(
                f"Invalid score: {self.score}. "
                f"Must be {settings.MIN_SCORE}-{settings.MAX_SCORE}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "Review":
        """Create Review from JSON dict."""
        return cls(
            id=data["id"],
            movie_id=data["movie_id"],
            user=data["user"],
            score=data["score"],
            text=data.get("text", "")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "movie_id": self.movie_id,
            "user": self.user,
            "score": self.score,
            "text": self.text
        }
