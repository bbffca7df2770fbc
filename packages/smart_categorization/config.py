"""Runtime settings for matching, fan-out and suggestions.

Settings are a small validated Pydantic model. ``load_settings()`` builds one
from ``SC_*`` environment variables; callers may also construct
``MatchingSettings`` directly (tests do).
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, field_validator

DEFAULT_FUZZY_THRESHOLD = 0.8
DEFAULT_AMOUNT_TOLERANCE = 0.01

_ENV_FIELDS: dict[str, str] = {
    "SC_FUZZY_THRESHOLD": "fuzzy_threshold",
    "SC_AMOUNT_TOLERANCE": "amount_tolerance",
    "SC_SECONDARY_CONCURRENCY": "secondary_concurrency",
    "SC_SUGGESTION_MIN_CONFIDENCE": "suggestion_min_confidence",
}


class MatchingSettings(BaseModel):
    """Tunables shared by the matcher, the orchestrator and the suggester."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Minimum merchant similarity for two payees to count as the same.
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD
    # Absolute amount difference accepted by the broad matcher (strictly less).
    amount_tolerance: float = DEFAULT_AMOUNT_TOLERANCE
    # Worker cap for secondary applications; 1 keeps them sequential.
    secondary_concurrency: int = 1
    suggestion_min_confidence: float = 0.0

    @field_validator("fuzzy_threshold", "suggestion_min_confidence")
    @classmethod
    def _in_unit_interval(cls, v: float) -> float:
        fv = float(v)
        if 0.0 <= fv <= 1.0:
            return fv
        raise ValueError("must be within [0,1]")

    @field_validator("amount_tolerance")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("amount_tolerance must be >= 0")
        return float(v)

    @field_validator("secondary_concurrency")
    @classmethod
    def _positive(cls, v: int) -> int:
        if isinstance(v, bool) or v < 1:
            raise ValueError("secondary_concurrency must be a positive integer")
        return v


def load_settings(environ: Mapping[str, str] | None = None) -> MatchingSettings:
    """Build settings from ``SC_*`` environment variables.

    Unset or blank variables keep their defaults. Malformed values surface as
    ``pydantic.ValidationError`` so misconfiguration fails at startup.
    """

    env = os.environ if environ is None else environ
    values: dict[str, str] = {}
    for var, field in _ENV_FIELDS.items():
        raw = env.get(var)
        if raw is not None and raw.strip():
            values[field] = raw.strip()
    # Lax mode: numeric strings coerce to float/int.
    return MatchingSettings.model_validate(values)


__all__ = [
    "DEFAULT_AMOUNT_TOLERANCE",
    "DEFAULT_FUZZY_THRESHOLD",
    "MatchingSettings",
    "load_settings",
]
