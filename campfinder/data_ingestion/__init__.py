"""
Camp catalog ingestion.

Responsibilities:
- Read a CSV export of the ``camps`` table.
- Normalize rows into ``Camp`` records (JSON columns, numbers, dates).
- Write a cleaned catalog for the in-memory store.
"""
