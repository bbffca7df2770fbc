"""Outcome values and the error taxonomy.

Operations of the orchestrator return ``Ok(value)`` or ``Err(error)`` instead
of raising, so callers handle validation and lookup failures as data:

- :class:`ValidationError`: malformed command; carries *all* violations.
- :class:`NotFoundError`: referenced transaction or category is absent.
- :class:`PersistenceError`: a repository call raised; wraps the cause.

Partial failures while expanding a scoped command are deliberately not an
error type. They surface as a lower ``applied_count`` (and ``skipped``) in a
successful result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .models import Violation

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ValidationError:
    violations: tuple[Violation, ...]

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]

    def __str__(self) -> str:
        return "; ".join(self.messages)


@dataclass(frozen=True, slots=True)
class NotFoundError:
    entity: str
    id: str

    def __str__(self) -> str:
        return f"{self.entity.capitalize()} not found: {self.id!r}"


@dataclass(frozen=True, slots=True)
class PersistenceError:
    operation: str
    detail: str
    cause: BaseException | None = None

    def __str__(self) -> str:
        return f"{self.operation} failed: {self.detail}"


type DomainError = ValidationError | NotFoundError | PersistenceError


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err:
    error: DomainError

    @property
    def ok(self) -> bool:
        return False


type Outcome[V] = Ok[V] | Err


def persistence_error(operation: str, exc: BaseException) -> Err:
    """Wrap a repository exception with the operation that raised it."""

    return Err(PersistenceError(operation=operation, detail=str(exc) or type(exc).__name__, cause=exc))


__all__ = [
    "DomainError",
    "Err",
    "NotFoundError",
    "Ok",
    "Outcome",
    "PersistenceError",
    "ValidationError",
    "persistence_error",
]
