"""
Data models for MovieLedger.

- Movie / MovieView: registered movies and their aggregates
- Review: one user's rating of one movie
- Events: MovieAdded / MovieRated notifications
"""
