"""ORM models for the ledger tables read and written by ``smart_categorization``."""

from .ledger import Base, LedgerCategory, LedgerTransaction

__all__ = [
    "Base",
    "LedgerCategory",
    "LedgerTransaction",
]
