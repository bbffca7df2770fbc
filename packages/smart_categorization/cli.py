"""CLI for the ``smart_categorization`` package.

A Typer console over :class:`~smart_categorization.orchestrator.SmartCategorizer`
backed by the SQL repository, plus a few offline helpers for inspecting
pattern keys and merchant similarity. Environment variables (``DATABASE_URL``
and the ``SC_*`` tunables) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs.

Failures are reported as one ``Error: ...`` line on stderr and exit code 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from dotenv import load_dotenv
from pydantic import ValidationError as SettingsError

from .config import MatchingSettings, load_settings
from .logging_setup import configure_logging
from .models import CategorizationScope, CategorizeCommand, Suggestion, TagCommand
from .outcome import Err
from .patterns import fold_hash, pattern_text
from .similarity import similarity

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Propagate a category or tag from one transaction to similar ones. "
        "Loads DATABASE_URL and SC_* settings from a local .env."
    ),
)


# ---- Small module-level helpers used by CLI commands -------------------------


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _settings() -> MatchingSettings:
    try:
        return load_settings()
    except SettingsError as e:
        _fail(f"invalid SC_* settings: {e}")


def _categorizer(database_url: str | None):
    # Deferred import keeps offline commands free of database setup
    from .orchestrator import SmartCategorizer
    from .persistence import SqlAlchemyRepository

    return SmartCategorizer(SqlAlchemyRepository(database_url=database_url), _settings())


def _echo_suggestions(suggestions: list[Suggestion]) -> None:
    for s in suggestions:
        typer.echo(
            f"  [{s.scope}] {s.match_count} match(es), confidence {s.confidence:.2f}: {s.reason}"
        )
        if s.hints:
            typer.echo(f"    hints: {', '.join(s.hints)}")


# ---- Commands ------------------------------------------------------------------


@app.command("categorize")
def categorize_cmd(
    transaction_id: str = typer.Argument(..., help="Transaction to categorize."),
    category_id: str = typer.Argument(..., help="Category to assign."),
    *,
    scope: str = typer.Option(
        CategorizationScope.SINGLE.value, help="single, pattern or all."
    ),
    apply_to_future: bool = typer.Option(
        False, help="Also emit a standing-rule descriptor for future imports."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Categorize a transaction and, per scope, its matches."""

    outcome = _categorizer(database_url).categorize(
        CategorizeCommand(
            transaction_id=transaction_id,
            category_id=category_id,
            scope=scope,
            apply_to_future=apply_to_future,
        )
    )
    if isinstance(outcome, Err):
        _fail(str(outcome.error))

    result = outcome.value
    typer.echo(
        f"Categorized {result.transaction.id} as {result.transaction.category_id}: "
        f"applied={result.applied_count} skipped={result.skipped}"
    )
    if result.suggestions:
        typer.echo("Suggestions:")
        _echo_suggestions(result.suggestions)
    if result.created_rule is not None:
        rule = result.created_rule
        typer.echo(f"Rule {rule.id}: {rule.pattern_label!r} -> {rule.category_id}")


@app.command("tag")
def tag_cmd(
    transaction_id: str = typer.Argument(..., help="Transaction to tag."),
    tag: str = typer.Argument(..., help="Tag to add."),
    *,
    scope: str = typer.Option(
        CategorizationScope.SINGLE.value, help="single, pattern or all."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Add a tag to a transaction and, per scope, to its matches."""

    outcome = _categorizer(database_url).tag(
        TagCommand(transaction_id=transaction_id, tag=tag, scope=scope)
    )
    if isinstance(outcome, Err):
        _fail(str(outcome.error))

    result = outcome.value
    typer.echo(
        f"Tagged {result.applied_count} transaction(s) with {tag.strip()!r}: "
        f"{', '.join(result.affected_ids)} (skipped={result.skipped})"
    )


@app.command("suggest")
def suggest_cmd(
    transaction_id: str = typer.Argument(..., help="Transaction to look around."),
    *,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Show "apply to similar?" suggestions without changing anything."""

    outcome = _categorizer(database_url).get_suggestions(transaction_id)
    if isinstance(outcome, Err):
        _fail(str(outcome.error))
    if not outcome.value:
        typer.echo("No suggestions.")
        return
    _echo_suggestions(outcome.value)


@app.command("pattern-key")
def pattern_key_cmd(
    merchant: str = typer.Argument(..., help="Merchant text."),
    description: str | None = typer.Option(None, help="Optional description text."),
) -> None:
    """Print the pattern text and key for a merchant/description pair."""

    text = pattern_text(merchant, description)
    typer.echo(f"{fold_hash(text)}\t{text}")


@app.command("similarity")
def similarity_cmd(
    a: str = typer.Argument(..., help="First merchant."),
    b: str = typer.Argument(..., help="Second merchant."),
) -> None:
    """Print the similarity of two merchants and whether they are the same payee."""

    settings = _settings()
    score = similarity(a, b)
    verdict = "same" if score >= settings.fuzzy_threshold else "different"
    typer.echo(f"{score:.3f}\t{verdict} (threshold {settings.fuzzy_threshold:.2f})")


@app.command("duplicates")
def duplicates_cmd(
    *,
    threshold: float | None = typer.Option(
        None, help="Merchant similarity threshold (defaults to SC_FUZZY_THRESHOLD)."
    ),
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """List groups of likely duplicate transactions."""

    from .duplicates import find_duplicate_groups
    from .persistence import SqlAlchemyRepository

    settings = _settings()
    limit = settings.fuzzy_threshold if threshold is None else threshold
    try:
        transactions = SqlAlchemyRepository(database_url=database_url).find_all()
    except Exception as e:  # noqa: BLE001 - reported as a CLI error
        _fail(f"find_all failed: {e}")

    groups = find_duplicate_groups(transactions, limit, settings.amount_tolerance)
    if not groups:
        typer.echo("No duplicates found.")
        return
    for n, group in enumerate(groups, start=1):
        typer.echo(f"Group {n}:")
        for tx in group:
            typer.echo(
                f"  {tx.id}\t{tx.date.isoformat()}\t{tx.amount.amount} {tx.amount.currency}"
                f"\t{tx.merchant}"
            )


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    # Central logging setup so child loggers inherit configuration
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()
