"""
Movie Ledger Module.

Single source of truth for all movies and reviews.
Manages registration, rating, aggregates and notifications.
"""
