"""
Ledger Gateway.

The only entry point transports use to reach the ledger. Routes named
operations, injects the caller identity, rejects anything unknown, and
persists each accepted mutation before it is reported as done.
"""

import logging
from typing import Optional

from movieledger.registry.exceptions import UnknownOperation, ValueTransferRejected
from movieledger.registry.movie_ledger import MovieLedger
from movieledger.utils.storage import LedgerStorage

logger = logging.getLogger(__name__)

# operation -> (ledger method, takes caller)
OPERATIONS = {
    "add_movie": ("add_movie", True),
    "rate_movie": ("rate_movie", True),
    "get_movies_count": ("get_movies_count", False),
    "get_movie": ("get_movie", False),
    "movies": ("movies", False),
    "total_ratings": ("total_ratings", False),
    "total_scores": ("total_scores", False),
    "average_score": ("average_score", False),
    "reviews": ("reviews", False),
    "review_count": ("get_review_count", False),
    "owner": (None, False),
}

ALIASES = {
    "addMovie": "add_movie",
    "rateMovie": "rate_movie",
    "getMoviesCount": "get_movies_count",
    "getMovie": "get_movie",
    "totalRatings": "total_ratings",
    "totalScores": "total_scores",
    "averageScore": "average_score",
    "reviewCount": "review_count",
}


class LedgerGateway:
    """
    Dispatches external calls onto a MovieLedger.

    Calls are synchronous; errors raised by the ledger reach the
    caller unchanged.
    """

    def __init__(self, ledger: MovieLedger, storage: Optional[LedgerStorage] = None):
        """
        Args:
            ledger: Initialized ledger to serve
            storage: If given, installed as the ledger's commit hook so every
                accepted mutation is saved inside the ledger lock. A failed
                save undoes the mutation.
        """
        self.ledger = ledger
        self.storage = storage
        if storage is not None:
            ledger.commit_hook = storage.save

    @staticmethod
    def resolve(operation: str) -> str:
        """Canonical operation name, or UnknownOperation."""
        name = ALIASES.get(operation, operation)
        if name not in OPERATIONS:
            raise UnknownOperation(operation)
        return name

    def call(self, caller: str, operation: str, *args, value: int = 0, **kwargs):
        """
        Invoke one ledger operation on behalf of caller.

        Args:
            caller: Pre-authenticated caller identity
            operation: Public operation name (snake_case or camelCase)
            value: Value attached to the call; must be zero

        Raises:
            UnknownOperation: If operation is not part of the ledger surface
            ValueTransferRejected: If value is attached
        """
        try:
            name = self.resolve(operation)
        except UnknownOperation:
            logger.warning(f"Rejected unknown operation {operation!r} from {caller!r}")
            raise

        if value:
            logger.warning(f"Rejected {name} from {caller!r} carrying value {value}")
            raise ValueTransferRejected(value)

        method_name, takes_caller = OPERATIONS[name]
        if method_name is None:
            return self.ledger.owner

        method = getattr(self.ledger, method_name)
        if takes_caller:
            args = (caller,) + args
        return method(*args, **kwargs)
