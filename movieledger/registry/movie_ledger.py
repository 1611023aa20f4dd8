"""
Movie Ledger - Single source of truth for movies and their ratings.

Manages movie registration, one-review-per-user rating, running
aggregates, and ordered change notifications.
"""

import logging
import threading
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from movieledger.models.events import MovieAdded, MovieRated
from movieledger.models.movie import Movie, MovieView
from movieledger.models.review import Review, is_valid_score
from movieledger.registry.exceptions import (
    AlreadyInitialized,
    CorruptLedger,
    DuplicateMovie,
    DuplicateRating,
    InvalidInput,
    NoRatings,
    NotFound,
    NotInitialized,
    Unauthorized,
)
from movieledger.registry.notifications import NotificationLog

logger = logging.getLogger(__name__)


def _is_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class MovieLedger:
    """
    Authoritative ledger of movies and reviews.

    Every operation runs under one re-entrant lock, so each call is
    applied completely or rejected with nothing changed. Preconditions
    are all checked before the first mutation.

    State:
    - movies: ordered by id (id == position + 1)
    - reviews: ordered by id (id == position + 1)
    - name -> movie id index (duplicate names)
    - (movie id, user) -> review index (duplicate ratings)
    """

    def __init__(self, owner: Optional[str] = None, notifications: Optional[NotificationLog] = None):
        """
        Create a ledger, optionally initializing it in the same step.

        Args:
            owner: Identity allowed to add movies
            notifications: Event channel (a fresh log if omitted)
        """
        self._lock = threading.RLock()
        self._owner: Optional[str] = None
        self._movies: List[Movie] = []
        self._reviews: List[Review] = []
        self._movie_ids_by_name: Dict[str, int] = {}
        self._reviews_by_key: Dict[Tuple[int, str], Review] = {}
        self.notifications = notifications if notifications is not None else NotificationLog()
        # Called with the ledger after each mutation, before its event is emitted
        self.commit_hook: Optional[Callable[["MovieLedger"], None]] = None

        if owner is not None:
            self.initialize(owner)

    def initialize(self, owner: str) -> str:
        """
        Fix the ledger owner. Allowed exactly once.

        Returns:
            The owner identity

        Raises:
            AlreadyInitialized: If an owner is already set
            InvalidInput: If owner is empty
        """
        with self._lock:
            if self._owner is not None:
                raise AlreadyInitialized(self._owner)
            if not owner:
                raise InvalidInput("Owner identity must not be empty")
            self._owner = owner
            logger.info(f"Ledger initialized with owner {owner!r}")
            return owner

    @property
    def initialized(self) -> bool:
        return self._owner is not None

    @property
    def owner(self) -> str:
        with self._lock:
            self._require_initialized()
            return self._owner

    # Movies

    def add_movie(self, caller: str, name: str) -> int:
        """
        Register a new movie. Owner only.

        Args:
            caller: Identity invoking the operation
            name: Movie title (case-sensitive, unique)

        Returns:
            The new movie id

        Raises:
            Unauthorized: If caller is not the owner
            InvalidInput: If name is empty
            DuplicateMovie: If name is already registered
            Exception: Whatever the commit hook raises; the movie is not added
        """
        with self._lock:
            self._require_initialized()

            if caller != self._owner:
                logger.warning(f"Rejected add_movie from non-owner {caller!r}")
                raise Unauthorized(f"Only the owner can add movies (caller: {caller!r})")

            if not isinstance(name, str) or not name:
                logger.warning("Rejected add_movie with empty name")
                raise InvalidInput("Movie name must be a non-empty string")

            existing_id = self._movie_ids_by_name.get(name)
            if existing_id is not None:
                logger.warning(f"Rejected duplicate movie {name!r}")
                raise DuplicateMovie(name, existing_id)

            movie = Movie(id=len(self._movies) + 1, name=name)
            self._movies.append(movie)
            self._movie_ids_by_name[name] = movie.id

            try:
                self._commit()
            except Exception:
                del self._movie_ids_by_name[name]
                self._movies.pop()
                logger.error(f"Commit failed, movie {name!r} not added")
                raise

            logger.info(f"Added movie {movie.id} - {name!r}")

            self.notifications.emit(MovieAdded(movie_id=movie.id, name=name))
            return movie.id

    def get_movies_count(self) -> int:
        """Total number of movies ever added."""
        with self._lock:
            self._require_initialized()
            return len(self._movies)

    def get_movie(self, movie_id: int) -> MovieView:
        """
        Look up a movie by id.

        Raises:
            NotFound: If movie_id is outside 1..get_movies_count()
        """
        with self._lock:
            return self._find_movie(movie_id).view()

    def movies(self, index: int) -> MovieView:
        """Zero-based positional access into the movie sequence."""
        with self._lock:
            self._require_initialized()
            if not _is_id(index) or not (0 <= index < len(self._movies)):
                raise NotFound(f"No movie at index {index}")
            return self._movies[index].view()

    def iter_movies(self) -> Iterator[MovieView]:
        """Snapshot of all movies, ordered by id."""
        with self._lock:
            self._require_initialized()
            views = [movie.view() for movie in self._movies]
        return iter(views)

    # Ratings

    def rate_movie(self, caller: str, movie_id: int, score: int, text: str = "") -> int:
        """
        Record the caller's single review of a movie.

        Aggregates are updated in the same critical section as the
        review insert, and the MovieRated event carries the
        post-update values.

        Args:
            caller: Identity submitting the review
            movie_id: Movie being rated
            score: Integer 1-5
            text: Free-form review text, may be empty

        Returns:
            The new review id

        Raises:
            NotFound: If movie_id does not reference a movie
            InvalidInput: If score is outside 1-5 or text is not a string
            DuplicateRating: If caller already rated this movie
            Exception: Whatever the commit hook raises; the review is not recorded
        """
        with self._lock:
            movie = self._find_movie(movie_id)

            if not is_valid_score(score):
                logger.warning(f"Rejected score {score!r} for movie {movie_id}")
                raise InvalidInput(f"Invalid score: {score!r}. Must be 1-5")

            if text is None:
                text = ""
            if not isinstance(text, str):
                raise InvalidInput("Review text must be a string")

            if (movie_id, caller) in self._reviews_by_key:
                logger.warning(f"Rejected second rating of movie {movie_id} by {caller!r}")
                raise DuplicateRating(movie_id, caller)

            review = self._apply_review(movie, caller, score, text)

            try:
                self._commit()
            except Exception:
                self._revert_review(movie, review)
                logger.error(f"Commit failed, rating of movie {movie_id} by {caller!r} not recorded")
                raise

            logger.info(
                f"Review {review.id}: movie {movie_id} rated {score} by {caller!r} "
                f"(ratings={movie.total_ratings}, scores={movie.total_scores})"
            )

            self.notifications.emit(MovieRated(
                review_id=review.id,
                movie_id=movie.id,
                user=caller,
                score=score,
                text=text,
                total_ratings=movie.total_ratings,
                total_scores=movie.total_scores
            ))
            return review.id

    def total_ratings(self, movie_id: int) -> int:
        with self._lock:
            return self._find_movie(movie_id).total_ratings

    def total_scores(self, movie_id: int) -> int:
        with self._lock:
            return self._find_movie(movie_id).total_scores

    def average_score(self, movie_id: int) -> int:
        """
        Integer average of a movie's scores, truncated toward zero
        (8 over 2 ratings is 4, 7 over 2 ratings is 3).

        Raises:
            NotFound: If movie_id does not reference a movie
            NoRatings: If the movie has not been rated yet
        """
        with self._lock:
            movie = self._find_movie(movie_id)
            if movie.total_ratings == 0:
                raise NoRatings(movie_id)
            return movie.total_scores // movie.total_ratings

    @property
    def review_count(self) -> int:
        with self._lock:
            self._require_initialized()
            return len(self._reviews)

    def get_review_count(self) -> int:
        return self.review_count

    def reviews(self, movie_id: int, user: str) -> Review:
        """
        Point lookup of the review a user left on a movie.

        Raises:
            NotFound: If that user has not rated that movie
        """
        with self._lock:
            self._require_initialized()
            review = self._reviews_by_key.get((movie_id, user))
            if review is None:
                raise NotFound(f"No review of movie {movie_id} by {user!r}")
            return review

    def get_review(self, review_id: int) -> Review:
        with self._lock:
            self._require_initialized()
            if not _is_id(review_id) or not (1 <= review_id <= len(self._reviews)):
                raise NotFound(f"Review not found: {review_id}")
            return self._reviews[review_id - 1]

    def has_rated(self, movie_id: int, user: str) -> bool:
        with self._lock:
            return (movie_id, user) in self._reviews_by_key

    def iter_reviews(self) -> Iterator[Review]:
        """Snapshot of all reviews, ordered by id."""
        with self._lock:
            self._require_initialized()
            reviews = list(self._reviews)
        return iter(reviews)

    # Persistence

    def snapshot(self) -> dict:
        """Full ledger state as a JSON-serializable dict."""
        with self._lock:
            self._require_initialized()
            return {
                "owner": self._owner,
                "movie_count": len(self._movies),
                "review_count": len(self._reviews),
                "movies": [movie.to_dict() for movie in self._movies],
                "reviews": [review.to_dict() for review in self._reviews]
            }

    @classmethod
    def from_snapshot(cls, data: dict, notifications: Optional[NotificationLog] = None) -> "MovieLedger":
        """
        Rebuild a ledger from a snapshot, re-checking every invariant.

        Reviews are replayed onto zeroed movies; the recomputed
        aggregates must match the stored ones. Replay emits no
        notifications.

        Raises:
            CorruptLedger: If the snapshot is malformed or inconsistent
        """
        try:
            ledger = cls(owner=data["owner"], notifications=notifications)

            for position, movie_data in enumerate(data.get("movies", []), start=1):
                movie = Movie(id=movie_data["id"], name=movie_data["name"])
                if movie.id != position:
                    raise CorruptLedger(f"Movie ids are not sequential at position {position}")
                if movie.name in ledger._movie_ids_by_name:
                    raise CorruptLedger(f"Duplicate movie name {movie.name!r}")
                ledger._movies.append(movie)
                ledger._movie_ids_by_name[movie.name] = movie.id

            for position, review_data in enumerate(data.get("reviews", []), start=1):
                review = Review.from_dict(review_data)
                if review.id != position:
                    raise CorruptLedger(f"Review ids are not sequential at position {position}")
                if not (1 <= review.movie_id <= len(ledger._movies)):
                    raise CorruptLedger(f"Review {review.id} references unknown movie {review.movie_id}")
                if (review.movie_id, review.user) in ledger._reviews_by_key:
                    raise CorruptLedger(
                        f"Review {review.id} duplicates a rating of movie {review.movie_id} by {review.user!r}"
                    )
                ledger._apply_review(
                    ledger._movies[review.movie_id - 1], review.user, review.score, review.text
                )

            for movie_data, movie in zip(data.get("movies", []), ledger._movies):
                stored = (movie_data.get("total_ratings", 0), movie_data.get("total_scores", 0))
                if stored != (movie.total_ratings, movie.total_scores):
                    raise CorruptLedger(
                        f"Movie {movie.id} aggregates {stored} do not match its reviews "
                        f"({movie.total_ratings}, {movie.total_scores})"
                    )
        except CorruptLedger:
            raise
        except (KeyError, TypeError, ValueError, InvalidInput) as e:
            raise CorruptLedger(f"Malformed ledger snapshot: {e}") from e

        logger.info(
            f"Restored ledger: {len(ledger._movies)} movies, {len(ledger._reviews)} reviews"
        )
        return ledger

    # Internals

    def _require_initialized(self) -> None:
        if self._owner is None:
            raise NotInitialized()

    def _find_movie(self, movie_id) -> Movie:
        self._require_initialized()
        if not _is_id(movie_id) or not (1 <= movie_id <= len(self._movies)):
            raise NotFound(f"Movie not found: {movie_id}")
        return self._movies[movie_id - 1]

    def _apply_review(self, movie: Movie, user: str, score: int, text: str) -> Review:
        """Insert a review and fold it into the movie aggregates."""
        review = Review(
            id=len(self._reviews) + 1,
            movie_id=movie.id,
            user=user,
            score=score,
            text=text
        )
        self._reviews.append(review)
        self._reviews_by_key[(movie.id, user)] = review
        movie.record_score(score)
        return review

    def _revert_review(self, movie: Movie, review: Review) -> None:
        """Undo the most recent _apply_review."""
        self._reviews.pop()
        del self._reviews_by_key[(movie.id, review.user)]
        movie.total_ratings -= 1
        movie.total_scores -= review.score

    def _commit(self) -> None:
        """Run the commit hook; an error here means the mutation is undone."""
        if self.commit_hook is not None:
            self.commit_hook(self)
