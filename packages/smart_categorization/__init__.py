"""Public interface for the ``smart_categorization`` package.

This module exposes the orchestrator, the repository seam and the public
models/types as the stable import surface. There is no runtime logic here,
only symbol re-exports. The SQL repository lives in
:mod:`smart_categorization.persistence` and is imported from there so that
in-memory users never load SQLAlchemy.
"""

from .config import MatchingSettings, load_settings
from .matching import find_matches, find_pattern_matches, matches_for_scope
from .models import (
    CategorizationResult,
    CategorizationScope,
    CategorizeCommand,
    Category,
    CategoryKind,
    Money,
    RuleDescriptor,
    Suggestion,
    TagCommand,
    TagResult,
    Transaction,
    TransactionKind,
    Violation,
)
from .orchestrator import SmartCategorizer
from .outcome import Err, NotFoundError, Ok, Outcome, PersistenceError, ValidationError
from .patterns import build_key, pattern_label
from .repository import InMemoryRepository, TransactionRepository
from .suggestions import suggest

__all__ = [
    # Engine
    "SmartCategorizer",
    "suggest",
    "build_key",
    "pattern_label",
    "find_matches",
    "find_pattern_matches",
    "matches_for_scope",
    # Repository seam
    "TransactionRepository",
    "InMemoryRepository",
    # Settings
    "MatchingSettings",
    "load_settings",
    # Outcomes
    "Ok",
    "Err",
    "Outcome",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    # Models / types
    "Money",
    "Transaction",
    "TransactionKind",
    "Category",
    "CategoryKind",
    "CategorizationScope",
    "CategorizeCommand",
    "TagCommand",
    "Violation",
    "RuleDescriptor",
    "Suggestion",
    "CategorizationResult",
    "TagResult",
]
