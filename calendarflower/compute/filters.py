"""Filter stage applied to the raw aggregate list before every render pass."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence, Union

from .core.types import DateRange, EventAggregate, EventType


def _event_type_value(event_type: Union[str, EventType]) -> str:
    if isinstance(event_type, EventType):
        return event_type.value
    return str(event_type)


def in_date_range(record: EventAggregate, date_range: DateRange) -> bool:
    """Whether the record's whole month lies inside ``date_range``.

    Bounds are compared as ISO strings. Malformed bounds are not validated
    and simply compare lexicographically.
    """
    if date_range.start and not record.month_start >= date_range.start:
        return False
    if date_range.end and not record.month_end <= date_range.end:
        return False
    return True


def filter_aggregates(
    data: Sequence[EventAggregate],
    event_type: Optional[Union[str, EventType]] = None,
    date_range: Optional[Any] = None,
) -> List[EventAggregate]:
    """Narrow the aggregate list to the active event type and date range.

    Args:
        data: Aggregates in source order. Never mutated.
        event_type: Exact, case-sensitive category to keep; ``None`` keeps all.
        date_range: ``DateRange`` or ``{"start", "end"}`` mapping; ``None`` or
            a range with neither bound keeps all.

    Returns:
        A new list preserving source order.
    """
    out = list(data)
    if event_type:
        wanted = _event_type_value(event_type)
        out = [r for r in out if r.event_type.value == wanted]
    dr = DateRange.coerce(date_range)
    if dr is not None and dr.is_active:
        out = [r for r in out if in_date_range(r, dr)]
    return out
