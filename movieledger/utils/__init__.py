"""
Utility modules for MovieLedger.

Cross-cutting concerns:
- Storage: Snapshot persistence for the ledger
"""
