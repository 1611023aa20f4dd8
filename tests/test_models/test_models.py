"""
Basic unit tests for Movie and Review models.
"""

import pytest

from movieledger.models.movie import Movie, MovieView
from movieledger.models.review import Review, is_valid_score


def test_review_score_validation():
    """Test Review score range validation."""
    review = Review(id=1, movie_id=1, user="alice", score=5)
    assert review.text == ""

    # Out of range should raise ValueError
    with pytest.raises(ValueError):
        Review(id=1, movie_id=1, user="alice", score=0)
    with pytest.raises(ValueError):
        Review(id=1, movie_id=1, user="alice", score=6)


@pytest.mark.parametrize("score,valid", [
    (1, True), (3, True), (5, True),
    (0, False), (6, False), (-3, False),
    (2.0, False), ("2", False), (True, False), (None, False),
])
def test_is_valid_score(score, valid):
    assert is_valid_score(score) is valid


def test_movie_requires_name():
    with pytest.raises(ValueError):
        Movie(id=1, name="")


def test_movie_record_score():
    movie = Movie(id=1, name="The Father")
    movie.record_score(4)
    movie.record_score(3)

    assert movie.total_ratings == 2
    assert movie.total_scores == 7
    assert movie.view() == MovieView(id=1, name="The Father", total_ratings=2, total_scores=7)


def test_movie_view_is_detached():
    movie = Movie(id=1, name="The Father")
    view = movie.view()
    movie.record_score(5)

    assert view.total_ratings == 0
    with pytest.raises(AttributeError):
        view.total_ratings = 3


def test_serialization():
    movie = Movie(id=2, name="Tom & Jerry", total_ratings=2, total_scores=8)
    assert Movie.from_dict(movie.to_dict()) == movie

    review = Review(id=3, movie_id=2, user="user2", score=3, text="cute")
    assert Review.from_dict(review.to_dict()) == review
