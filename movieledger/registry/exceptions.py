class LedgerError(Exception):
    """Base class for every rejection raised by the ledger"""
    pass

class Unauthorized(LedgerError):
    """Caller lacks the privilege the operation requires"""
    pass

class NotInitialized(Unauthorized):
    """Ledger has no owner yet"""

    def __init__(self):
        super().__init__("Ledger has not been initialized. Call `.initialize()` first.")

class AlreadyInitialized(LedgerError):
    """Owner is fixed once set"""

    def __init__(self, owner=None):
        if owner is not None:
            message = f'Ledger is already owned by {repr(owner)}.'
        else:
            message = 'Ledger is already initialized.'
        super().__init__(message)

class InvalidInput(LedgerError):
    """Malformed argument (empty name, score out of range)"""
    pass

class DuplicateMovie(LedgerError):
    """Movie name is already registered"""

    def __init__(self, name, movie_id=None):
        self.name = name
        self.movie_id = movie_id
        message = f'Movie {repr(name)} already exists'
        if movie_id is not None:
            message += f' with ID: {movie_id}'
        super().__init__(message)

class DuplicateRating(LedgerError):
    """Caller already rated this movie"""

    def __init__(self, movie_id, user):
        self.movie_id = movie_id
        self.user = user
        super().__init__(f'User {repr(user)} already rated movie {movie_id}')

class NotFound(LedgerError):
    """Referenced movie or review does not exist"""
    pass

class NoRatings(LedgerError):
    """Average requested on a movie with zero ratings"""

    def __init__(self, movie_id):
        self.movie_id = movie_id
        super().__init__(f'Movie {movie_id} has not been rated yet')

class UnknownOperation(LedgerError):
    """Operation name is not part of the ledger's public surface"""

    def __init__(self, operation):
        self.operation = operation
        super().__init__(f'No such operation: {repr(operation)}')

class ValueTransferRejected(LedgerError):
    """Calls carrying value are never accepted"""

    def __init__(self, value):
        self.value = value
        super().__init__(f'Ledger does not accept value transfers (got {value})')

class CorruptLedger(LedgerError):
    """Persisted snapshot is unreadable or violates ledger invariants"""
    pass
