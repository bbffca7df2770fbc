"""Scoped categorization and tagging.

:class:`SmartCategorizer` runs one command to completion through these phases::

    VALIDATING -> RESOLVING -> APPLYING_PRIMARY
        -> (scope != single) EXPANDING_MATCHES -> APPLYING_SECONDARY*
        -> COMPLETED

``FAILED`` is reached from validation, resolution or a failed primary write.
Everything after the primary write is best effort: a secondary that fails is
counted in ``skipped`` and logged, and the command still succeeds with a
smaller ``applied_count``.

The repository is injected; the engine keeps no state between commands.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from .config import MatchingSettings
from .fanout import apply_each
from .logging_setup import command_context, get_logger
from .matching import matches_for_scope
from .models import (
    CategorizationResult,
    CategorizationScope,
    CategorizeCommand,
    Category,
    Suggestion,
    TagCommand,
    TagResult,
    Transaction,
    Violation,
)
from .outcome import Err, NotFoundError, Ok, Outcome, ValidationError, persistence_error
from .repository import TransactionRepository
from .rules import build_rule
from .suggestions import suggest

logger = get_logger(__name__)


class Phase(StrEnum):
    VALIDATING = "validating"
    RESOLVING = "resolving"
    APPLYING_PRIMARY = "applying_primary"
    EXPANDING_MATCHES = "expanding_matches"
    APPLYING_SECONDARY = "applying_secondary"
    COMPLETED = "completed"
    FAILED = "failed"


class SmartCategorizer:
    """Apply a category or tag to a transaction and, by scope, to its matches."""

    def __init__(
        self,
        repository: TransactionRepository,
        settings: MatchingSettings | None = None,
    ) -> None:
        self._repo = repository
        self._settings = settings or MatchingSettings()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def categorize(self, command: CategorizeCommand) -> Outcome[CategorizationResult]:
        """Categorize the source transaction and, per scope, its matches."""

        with command_context("categorize", command.transaction_id or ""):
            return self._categorize(command)

    def tag(self, command: TagCommand) -> Outcome[TagResult]:
        """Add a tag to the source transaction and, per scope, to its matches.

        Tags are merged as a set union: a transaction that already carries the
        tag is not written again. Matches that already had the tag are not
        reported as affected.
        """

        with command_context("tag", command.transaction_id or ""):
            return self._tag(command)

    def get_suggestions(self, transaction_id: str) -> Outcome[list[Suggestion]]:
        """Suggestions for one stored transaction; never mutates."""

        with command_context("suggest", transaction_id or ""):
            return self._get_suggestions(transaction_id)

    # ------------------------------------------------------------------
    # Command bodies (run inside a command context)
    # ------------------------------------------------------------------

    def _categorize(self, command: CategorizeCommand) -> Outcome[CategorizationResult]:
        self._enter(Phase.VALIDATING)
        violations = command.validate()
        if violations:
            return self._fail(Err(ValidationError(tuple(violations))))

        scope = CategorizationScope(command.scope)
        tx_id = command.transaction_id.strip()
        category_id = command.category_id.strip()

        self._enter(Phase.RESOLVING)
        found = self._resolve_transaction(tx_id)
        if isinstance(found, Err):
            return self._fail(found)
        category = self._resolve_category(category_id)
        if isinstance(category, Err):
            return self._fail(category)
        cat: Category = category.value

        self._enter(Phase.APPLYING_PRIMARY)
        source = found.value.with_category(cat.id)
        try:
            self._repo.save(source)
        except Exception as exc:  # noqa: BLE001 - reported as an outcome
            return self._fail(persistence_error("save", exc))

        applied, skipped = 1, 0
        suggestions: list[Suggestion] = []
        if scope is not CategorizationScope.SINGLE:
            self._enter(Phase.EXPANDING_MATCHES)
            matches = self._expand(source, scope)
            if isinstance(matches, Err):
                return self._fail(matches)

            self._enter(Phase.APPLYING_SECONDARY)
            results = apply_each(
                matches.value,
                lambda m: self._repo.save(m.with_category(cat.id)),
                concurrency=self._settings.secondary_concurrency,
            )
            for r in results:
                if r.ok:
                    applied += 1
                else:
                    skipped += 1
                    logger.warning(
                        "Skipped categorizing %s as %s: %s", r.item.id, cat.id, r.error
                    )
            suggestions = self._fresh_suggestions(source)

        created_rule = build_rule(source, cat.id) if command.apply_to_future else None

        self._enter(Phase.COMPLETED)
        logger.info(
            "Categorized %s as %s (scope=%s, applied=%d, skipped=%d)",
            tx_id,
            cat.id,
            scope,
            applied,
            skipped,
        )
        return Ok(
            CategorizationResult(
                transaction=source,
                applied_count=applied,
                suggestions=suggestions,
                created_rule=created_rule,
                skipped=skipped,
            )
        )

    def _tag(self, command: TagCommand) -> Outcome[TagResult]:
        self._enter(Phase.VALIDATING)
        violations = command.validate()
        if violations:
            return self._fail(Err(ValidationError(tuple(violations))))

        scope = CategorizationScope(command.scope)
        tx_id = command.transaction_id.strip()
        tag = command.tag.strip()

        self._enter(Phase.RESOLVING)
        found = self._resolve_transaction(tx_id)
        if isinstance(found, Err):
            return self._fail(found)
        tx: Transaction = found.value

        self._enter(Phase.APPLYING_PRIMARY)
        if not tx.has_tag(tag):
            try:
                self._repo.update_tags(tx.id, [*tx.tags, tag])
            except Exception as exc:  # noqa: BLE001
                return self._fail(persistence_error("update_tags", exc))
        source = tx.with_tag(tag)

        affected = [source.id]
        skipped = 0
        if scope is not CategorizationScope.SINGLE:
            self._enter(Phase.EXPANDING_MATCHES)
            matches = self._expand(source, scope)
            if isinstance(matches, Err):
                return self._fail(matches)

            self._enter(Phase.APPLYING_SECONDARY)
            results = apply_each(
                matches.value,
                lambda m: self._merge_tag(m, tag),
                concurrency=self._settings.secondary_concurrency,
            )
            for r in results:
                if not r.ok:
                    skipped += 1
                    logger.warning("Skipped tagging %s with %r: %s", r.item.id, tag, r.error)
                elif r.value:
                    affected.append(r.item.id)

        self._enter(Phase.COMPLETED)
        logger.info(
            "Tagged %s with %r (scope=%s, affected=%d, skipped=%d)",
            tx_id,
            tag,
            scope,
            len(affected),
            skipped,
        )
        return Ok(
            TagResult(
                transaction=source,
                applied_count=len(affected),
                affected_ids=affected,
                skipped=skipped,
            )
        )

    def _get_suggestions(self, transaction_id: str) -> Outcome[list[Suggestion]]:
        if not transaction_id or not transaction_id.strip():
            violation = Violation("transaction_id", "Transaction ID cannot be empty")
            return Err(ValidationError((violation,)))
        found = self._resolve_transaction(transaction_id.strip())
        if isinstance(found, Err):
            return found
        try:
            everything = self._repo.find_all()
        except Exception as exc:  # noqa: BLE001
            return persistence_error("find_all", exc)
        return Ok(suggest(found.value, everything, self._settings))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_transaction(self, tx_id: str) -> Outcome[Transaction]:
        try:
            tx = self._repo.find_by_id(tx_id)
        except Exception as exc:  # noqa: BLE001
            return persistence_error("find_by_id", exc)
        if tx is None:
            return Err(NotFoundError("transaction", tx_id))
        return Ok(tx)

    def _resolve_category(self, category_id: str) -> Outcome[Category]:
        try:
            cat = self._repo.find_category_by_id(category_id)
        except Exception as exc:  # noqa: BLE001
            return persistence_error("find_category_by_id", exc)
        if cat is None:
            return Err(NotFoundError("category", category_id))
        return Ok(cat)

    def _expand(
        self, source: Transaction, scope: CategorizationScope
    ) -> Outcome[Sequence[Transaction]]:
        try:
            everything = self._repo.find_all()
        except Exception as exc:  # noqa: BLE001
            return persistence_error("find_all", exc)
        matches = matches_for_scope(
            source,
            everything,
            scope,
            amount_tolerance=self._settings.amount_tolerance,
        )
        logger.debug("Scope %s matched %d of %d transactions", scope, len(matches), len(everything))
        return Ok(matches)

    def _merge_tag(self, match: Transaction, tag: str) -> bool:
        # Re-read so the union is taken over the current tag set.
        current = self._repo.find_by_id(match.id) or match
        if current.has_tag(tag):
            return False
        self._repo.update_tags(current.id, [*current.tags, tag])
        return True

    def _fresh_suggestions(self, source: Transaction) -> list[Suggestion]:
        try:
            everything = self._repo.find_all()
        except Exception as exc:  # noqa: BLE001 - suggestions are optional
            logger.warning("Could not load transactions for suggestions: %s", exc)
            return []
        return suggest(source, everything, self._settings)

    @staticmethod
    def _enter(phase: Phase) -> None:
        logger.debug("-> %s", phase)

    @staticmethod
    def _fail(err: Err) -> Err:
        logger.debug("-> %s: %s", Phase.FAILED, err.error)
        return err


__all__ = ["Phase", "SmartCategorizer"]
