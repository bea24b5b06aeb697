"""Type definitions for the compute module.

This module defines the event aggregate record handed over by the external
aggregation layer, the filter and selection inputs, and the coercion helpers
that keep a render pass resilient to partially malformed upstream rows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, List, Mapping, Optional

MONTH_NAMES = (
    "JAN",
    "FEB",
    "MAR",
    "APR",
    "MAY",
    "JUN",
    "JUL",
    "AUG",
    "SEP",
    "OCT",
    "NOV",
    "DEC",
)


class EventType(str, Enum):
    """Normalized climate event category.

    Member order is the canonical order used when arcs are sorted by type.
    """

    DROUGHT = "Drought"
    FLOOD = "Flood"
    DTOF = "DtoF"
    DROUGHT_FLOOD = "DroughtFlood"

    @classmethod
    def parse(cls, label: Any) -> EventType:
        """Resolve a canonical name or a raw source label.

        Args:
            label: Either a canonical category (``"Drought"``) or one of the
                raw labels used by the source table (``"D"``, ``"F"``,
                ``"DtoF"``, ``"D&F"``).

        Returns:
            The matching ``EventType``.

        Raises:
            ValueError: If the label is not a known category.
        """
        if isinstance(label, cls):
            return label
        text = str(label).strip() if label is not None else ""
        try:
            return cls(text)
        except ValueError:
            pass
        if text in _SOURCE_LABELS:
            return _SOURCE_LABELS[text]
        raise ValueError(
            f"Unknown event type: {label!r}. Must be one of: "
            + ", ".join(m.value for m in cls)
        )

    @property
    def order(self) -> int:
        return list(EventType).index(self)


_SOURCE_LABELS = {
    "D": EventType.DROUGHT,
    "F": EventType.FLOOD,
    "DtoF": EventType.DTOF,
    "D&F": EventType.DROUGHT_FLOOD,
}


def coerce_int(value: Any, default: int = 0) -> int:
    """Parse an integer the way the visualization expects, never raising."""
    if value is None or isinstance(value, bool):
        return default
    try:
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else default
        return int(str(value).strip())
    except (TypeError, ValueError):
        try:
            f = float(str(value).strip())
        except (TypeError, ValueError):
            return default
        return int(f) if math.isfinite(f) else default


def coerce_float(value: Any, default: float = 0.0) -> float:
    """Parse a float, falling back to ``default`` for missing or NaN values."""
    if value is None or isinstance(value, bool):
        return default
    try:
        f = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    return f if math.isfinite(f) else default


def coerce_severity(value: Any) -> Optional[float]:
    """Severity is optional; unparsable values become ``None`` ("N/A")."""
    if value is None or isinstance(value, bool):
        return None
    try:
        f = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def month_start(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}-01"


def month_end(year: int, month: int) -> str:
    """Last day of the month: the day before the first of the next month."""
    if month == 12:
        first_next = date(year + 1, 1, 1)
    else:
        first_next = date(year, month + 1, 1)
    return (first_next - timedelta(days=1)).isoformat()


@dataclass(frozen=True)
class EventAggregate:
    """One (year, month, event type) aggregate from the source query.

    Attributes:
        year: Calendar year of the bucket.
        month: Month of the bucket, 1-12.
        event_type: Normalized category.
        original_type: Raw source label, display only.
        event_count: Number of events of this category in the month.
        severity: Mean intensity score, ``None`` when missing or unparsable.
        total_events_in_month: Denominator of ``percentage``.
        percentage: Share of the month's events, 0-100. Shares of one month
            are not guaranteed to sum to exactly 100.
        min_severity: Lowest intensity in the bucket, when provided.
        max_severity: Highest intensity in the bucket, when provided.
    """

    year: int
    month: int
    event_type: EventType
    original_type: str = ""
    event_count: int = 0
    severity: Optional[float] = None
    total_events_in_month: int = 0
    percentage: float = 0.0
    min_severity: Optional[float] = None
    max_severity: Optional[float] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> EventAggregate:
        """Build an aggregate from a loosely typed row.

        Numeric fields that cannot be parsed become ``0`` and severity becomes
        ``None``. Fields needed to place or color the arc are strict.

        Raises:
            ValueError: If the event type is unknown, or year/month cannot be
                used to place the record.
        """
        event_type = EventType.parse(row.get("event_type"))
        year = coerce_int(row.get("year"), default=-1)
        if year < 1:
            raise ValueError(f"Invalid year: {row.get('year')!r}")
        month = coerce_int(row.get("month"), default=0)
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {row.get('month')!r}")
        original = row.get("original_type")
        if original is None or (isinstance(original, float) and math.isnan(original)):
            original = event_type.value
        return cls(
            year=year,
            month=month,
            event_type=event_type,
            original_type=str(original),
            event_count=coerce_int(row.get("event_count")),
            severity=coerce_severity(row.get("severity")),
            total_events_in_month=coerce_int(row.get("total_events_in_month")),
            percentage=coerce_float(row.get("percentage")),
            min_severity=coerce_severity(row.get("min_severity")),
            max_severity=coerce_severity(row.get("max_severity")),
        )

    @property
    def month_start(self) -> str:
        return month_start(self.year, self.month)

    @property
    def month_end(self) -> str:
        return month_end(self.year, self.month)

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def severity_label(self) -> str:
        if self.severity is None:
            return "N/A"
        return f"{self.severity:.1f}"

    @property
    def breakdown_key(self) -> str:
        return f"{self.event_type.value} ({self.original_type})"

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "event_type": self.event_type.value,
            "original_type": self.original_type,
            "event_count": self.event_count,
            "severity": self.severity,
            "total_events_in_month": self.total_events_in_month,
            "percentage": self.percentage,
            "min_severity": self.min_severity,
            "max_severity": self.max_severity,
        }


@dataclass(frozen=True)
class DateRange:
    """Inclusive month-overlap date filter with ISO date string bounds."""

    start: Optional[str] = None
    end: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return bool(self.start) or bool(self.end)

    @classmethod
    def coerce(cls, value: Any) -> Optional[DateRange]:
        """Accept a ``DateRange``, a ``{"start", "end"}`` mapping or ``None``."""
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(start=value.get("start") or None, end=value.get("end") or None)
        raise TypeError(
            f"Unsupported date range: {value!r}. Provide a DateRange or a mapping with 'start'/'end'."
        )


@dataclass(frozen=True)
class LocationSelection:
    """Selection emitted by the upstream marker layer.

    The span is not validated here: ``first_year <= last_year`` is the
    caller's contract.
    """

    location_code: str
    first_year: int
    last_year: int

    @property
    def year_count(self) -> int:
        return self.last_year - self.first_year + 1


@dataclass
class LoadResult:
    """Result of loading raw rows into aggregates.

    Attributes:
        records: Aggregates in source order.
        warnings: One message per dropped row.
    """

    records: List[EventAggregate] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def dropped(self) -> int:
        return len(self.warnings)
