"""
MovieLedger.

Authoritative ledger of movies and per-user ratings with running
aggregates.
"""
