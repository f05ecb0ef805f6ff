"""Aggregation configuration and result dataclasses."""

from dataclasses import asdict, dataclass, field
from typing import Any

from pubmerge.matching.similarity import TitleMatchThresholds
from pubmerge.merge.policy import FieldPolicy, resolve_policies
from pubmerge.metrics.models import AggregateMetrics
from pubmerge.models import (
    AUTHORITATIVE_SOURCE,
    DEFAULT_SOURCE_ORDER,
    SCHEMA_VERSION,
    CanonicalPublication,
)

from .models import AggregationSummary

__all__ = ["AggregationConfig", "AggregationResult", "validate_source_order"]


def validate_source_order(source_order: Any) -> list[str]:
    """Check a processing order and return it as a list.

    Raises
    ------
    TypeError
        If ``source_order`` is None or a bare string.
    ValueError
        If a source is listed more than once.
    """
    if source_order is None:
        raise TypeError("source_order is required")
    if isinstance(source_order, str):
        raise TypeError("source_order must be a sequence of source names, not a string")

    order = [str(name) for name in source_order]
    seen: set[str] = set()
    duplicates: set[str] = set()
    for name in order:
        if name in seen:
            duplicates.add(name)
        seen.add(name)
    if duplicates:
        raise ValueError(f"source_order lists sources more than once: {sorted(duplicates)}")
    return order


@dataclass
class AggregationConfig:
    """Configuration for an aggregation run.

    Attributes
    ----------
    source_order : list[str]
        Processing order; earlier sources win FIRST_WINS fields.
    authoritative_source : str
        Source whose AUTHORITATIVE_OVERWRITE fields replace earlier values.
    short_title_threshold : float
        Dice threshold for short titles (default: 0.85).
    long_title_threshold : float
        Dice threshold for other titles (default: 0.80).
    short_title_length : int
        Normalized length below which a title is short (default: 30).
    i10_threshold : int
        Citation threshold of the i10-index (default: 10).
    field_policies : dict[str, FieldPolicy] | None
        Per-field overrides of the default merge policy table.
    """

    source_order: list[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_ORDER))
    authoritative_source: str = AUTHORITATIVE_SOURCE
    short_title_threshold: float = 0.85
    long_title_threshold: float = 0.80
    short_title_length: int = 30
    i10_threshold: int = 10
    field_policies: dict[str, FieldPolicy] | None = None

    def __post_init__(self) -> None:
        """Validate and normalize fields."""
        self.source_order = validate_source_order(self.source_order)

        if not self.authoritative_source:
            raise ValueError("authoritative_source must be a non-empty source name")

        if not 0.0 <= self.short_title_threshold <= 1.0:
            raise ValueError(
                f"short_title_threshold must be in [0, 1], got {self.short_title_threshold}"
            )

        if not 0.0 <= self.long_title_threshold <= 1.0:
            raise ValueError(
                f"long_title_threshold must be in [0, 1], got {self.long_title_threshold}"
            )

        if self.short_title_length < 1:
            raise ValueError(f"short_title_length must be >= 1, got {self.short_title_length}")

        if self.i10_threshold < 0:
            raise ValueError(f"i10_threshold must be >= 0, got {self.i10_threshold}")

        if self.field_policies is not None:
            # Validates names and coerces string values
            resolved = resolve_policies(self.field_policies)
            self.field_policies = {name: resolved[name] for name in self.field_policies}

    @property
    def thresholds(self) -> TitleMatchThresholds:
        """Title matcher thresholds."""
        return TitleMatchThresholds(
            short_threshold=self.short_title_threshold,
            long_threshold=self.long_title_threshold,
            short_length=self.short_title_length,
        )

    @property
    def policies(self) -> dict[str, FieldPolicy]:
        """Complete merge policy table."""
        return resolve_policies(self.field_policies)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        if self.field_policies is not None:
            data["field_policies"] = {k: str(v) for k, v in self.field_policies.items()}
        return data


@dataclass
class AggregationResult:
    """Result of an aggregation run.

    Attributes
    ----------
    publications : list[CanonicalPublication]
        Canonical publications, most cited first.
    metrics : AggregateMetrics
        Aggregate indicators.
    summary : AggregationSummary
        Run counters.
    """

    publications: list[CanonicalPublication]
    metrics: AggregateMetrics
    summary: AggregationSummary

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict[str, Any]
            Dictionary representation.
        """
        return {
            "schema_version": SCHEMA_VERSION,
            "publications": [pub.to_dict() for pub in self.publications],
            "metrics": self.metrics.to_dict(),
            "summary": self.summary.to_dict(),
        }
