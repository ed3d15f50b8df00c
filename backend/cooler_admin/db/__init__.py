"""Database Infrastructure — SQLAlchemy Base for the locally mapped tables.

Invariants:
    - All sessions are async (AsyncSession)
    - The upstream Cooler API owns the schema; mappings here cover only the columns we touch
"""
