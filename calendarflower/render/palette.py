"""Fixed color tables for the flower.

Event colors encode data; petal colors are purely decorative and must never
be read as data.
"""

from __future__ import annotations

from ..compute.core.types import EventType


def event_color(event_type: EventType) -> str:
    """Fill color for an event category.

    Raises:
        ValueError: If ``event_type`` is not a handled category.
    """
    if event_type is EventType.DROUGHT:
        return "#8B2635"
    if event_type is EventType.FLOOD:
        return "#1E90FF"
    if event_type is EventType.DTOF:
        return "#FF8C00"
    if event_type is EventType.DROUGHT_FLOOD:
        return "#9932CC"
    raise ValueError(f"No color defined for event type {event_type!r}")


def legend_description(event_type: EventType, compact: bool = False) -> str:
    """Legend label; ``compact`` is the shorter wording of the mobile overlay."""
    if event_type is EventType.DROUGHT:
        return "Drought (D)"
    if event_type is EventType.FLOOD:
        return "Flood (F)"
    if event_type is EventType.DTOF:
        return "Drought→Flood"
    if event_type is EventType.DROUGHT_FLOOD:
        return "D&F" if compact else "Drought+Flood (D&F)"
    raise ValueError(f"No legend entry defined for event type {event_type!r}")


# Built eagerly so a category without a color fails at import time.
EVENT_COLORS = {et: event_color(et) for et in EventType}

PETAL_COLORS = (
    "#FFB3BA",
    "#FFDFBA",
    "#FFFFBA",
    "#BAFFC9",
    "#BAE1FF",
    "#C9BAFF",
    "#FFBAE1",
    "#FFE4BA",
    "#E1BAFF",
    "#BAFFE4",
    "#FFCBA4",
    "#A4D4FF",
)


def petal_color(index: int) -> str:
    return PETAL_COLORS[index % len(PETAL_COLORS)]
