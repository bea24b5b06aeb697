"""Radial layout engine.

Computes the nested radial coordinate system of the calendar flower: one ring
per year from the center outward, twelve 30 degree month sectors per ring, and
the proportional arcs of each (year, month) group. Angles are in degrees,
0 at 12 o'clock and increasing clockwise.

The layout is a pure function of its inputs and is rebuilt on every render
pass; nothing here is retained between passes.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .core.types import MONTH_NAMES, EventAggregate

MONTH_SPAN = 30.0
RADIUS_FACTOR = 0.35
RING_SPACING = 1.5
BOUNDARY_OFFSET = 0.3
PETAL_TIP_RINGS = 3.0
LABEL_RINGS = 3.5


class ArcOrder(str, Enum):
    """Order of arcs inside one (year, month) group."""

    SOURCE = "source"
    EVENT_TYPE = "event_type"


@dataclass(frozen=True)
class YearRing:
    year: int
    ring_index: int
    inner_radius: float
    outer_radius: float
    is_outermost: bool = False

    @property
    def radius(self) -> float:
        return self.outer_radius

    @property
    def mid_radius(self) -> float:
        return (self.inner_radius + self.outer_radius) / 2.0


@dataclass(frozen=True)
class MonthSector:
    year: int
    month: int
    ring_index: int
    start_angle: float
    end_angle: float

    @property
    def label(self) -> str:
        return MONTH_NAMES[self.month - 1]


@dataclass(frozen=True)
class EventArc:
    """A proportional slice of a month sector for one aggregate.

    ``emphasized`` marks arcs on the outermost ring, whose outer edge is the
    boundary radius instead of the ring's own outer radius.
    """

    year: int
    month: int
    ring_index: int
    position: int
    event: EventAggregate
    start_angle: float
    end_angle: float
    inner_radius: float
    outer_radius: float
    emphasized: bool = False

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def key(self) -> str:
        return f"arc-{self.ring_index}-{self.month}-{self.position}"


@dataclass(frozen=True)
class RadialLayout:
    """Complete geometry for one render pass."""

    first_year: int
    last_year: int
    width: float
    height: float
    center: Tuple[float, float]
    max_radius: float
    ring_width: float
    boundary_radius: float
    rings: Tuple[YearRing, ...]
    sectors: Tuple[MonthSector, ...]
    arcs: Tuple[EventArc, ...]

    @property
    def year_count(self) -> int:
        return self.last_year - self.first_year + 1

    @property
    def petal_tip_radius(self) -> float:
        return self.max_radius + self.ring_width * PETAL_TIP_RINGS

    @property
    def label_radius(self) -> float:
        return self.max_radius + self.ring_width * LABEL_RINGS

    def ring_for_year(self, year: int) -> Optional[YearRing]:
        idx = year - self.first_year
        if 0 <= idx < len(self.rings):
            return self.rings[idx]
        return None

    def sectors_for_ring(self, ring_index: int) -> List[MonthSector]:
        return [s for s in self.sectors if s.ring_index == ring_index]

    def arcs_for(self, year: int, month: int) -> List[EventArc]:
        return [a for a in self.arcs if a.year == year and a.month == month]

    def arcs_for_year(self, year: int) -> List[EventArc]:
        return [a for a in self.arcs if a.year == year]

    def to_dict(self) -> dict:
        """JSON-safe geometry summary."""
        return {
            "first_year": self.first_year,
            "last_year": self.last_year,
            "year_count": self.year_count,
            "width": self.width,
            "height": self.height,
            "center": list(self.center),
            "max_radius": self.max_radius,
            "ring_width": self.ring_width,
            "boundary_radius": self.boundary_radius,
            "petal_tip_radius": self.petal_tip_radius,
            "label_radius": self.label_radius,
            "rings": [
                {
                    "year": r.year,
                    "ring_index": r.ring_index,
                    "inner_radius": r.inner_radius,
                    "outer_radius": r.outer_radius,
                }
                for r in self.rings
            ],
            "arcs": [
                {
                    "year": a.year,
                    "month": a.month,
                    "event_type": a.event.event_type.value,
                    "original_type": a.event.original_type,
                    "event_count": a.event.event_count,
                    "percentage": a.event.percentage,
                    "start_angle": a.start_angle,
                    "end_angle": a.end_angle,
                    "inner_radius": a.inner_radius,
                    "outer_radius": a.outer_radius,
                    "emphasized": a.emphasized,
                }
                for a in self.arcs
            ],
        }


def subdivide_month(
    percentages: Sequence[float], start_angle: float, span: float = MONTH_SPAN
) -> List[Tuple[float, float]]:
    """Split a month's angular span sequentially by percentage.

    Each share takes ``pct / 100 * span`` degrees starting where the previous
    one ended. Shares are neither renormalized nor clamped: a group summing to
    less than 100 leaves empty sector space, one summing to more runs past the
    month boundary.

    Args:
        percentages: Shares in the order they should be laid out.
        start_angle: Sector start, in degrees.
        span: Sector width, in degrees.

    Returns:
        ``(start, end)`` angle pairs, one per share.
    """
    if len(percentages) == 0:
        return []
    spans = np.asarray(percentages, dtype=float) / 100.0 * span
    ends = start_angle + np.cumsum(spans)
    starts = np.concatenate(([start_angle], ends[:-1]))
    return [(float(s), float(e)) for s, e in zip(starts, ends)]


def group_by_year_month(
    data: Iterable[EventAggregate], order: ArcOrder = ArcOrder.SOURCE
) -> Dict[Tuple[int, int], List[EventAggregate]]:
    """Group aggregates by (year, month), keeping the requested arc order."""
    groups: Dict[Tuple[int, int], List[EventAggregate]] = OrderedDict()
    for rec in data:
        groups.setdefault((rec.year, rec.month), []).append(rec)
    if ArcOrder(order) is ArcOrder.EVENT_TYPE:
        for key, members in groups.items():
            groups[key] = sorted(members, key=lambda r: r.event_type.order)
    return groups


def compute_layout(
    first_year: int,
    last_year: int,
    width: float,
    height: float,
    data: Sequence[EventAggregate] = (),
    *,
    arc_order: ArcOrder = ArcOrder.SOURCE,
) -> RadialLayout:
    """Compute rings, sectors and arcs for a year span.

    ``first_year <= last_year`` is the caller's contract; it is not checked.
    Records outside the span produce no arcs.
    """
    center = (width / 2.0, height / 2.0)
    max_radius = min(width, height) * RADIUS_FACTOR
    year_count = last_year - first_year + 1
    ring_width = max_radius / (year_count * RING_SPACING)
    boundary_radius = year_count * ring_width + ring_width * BOUNDARY_OFFSET

    rings: List[YearRing] = []
    sectors: List[MonthSector] = []
    for y in range(year_count):
        outer = (y + 1) * ring_width
        rings.append(
            YearRing(
                year=first_year + y,
                ring_index=y,
                inner_radius=outer - ring_width,
                outer_radius=outer,
                is_outermost=y == year_count - 1,
            )
        )
        for m in range(12):
            start = m * MONTH_SPAN
            sectors.append(
                MonthSector(
                    year=first_year + y,
                    month=m + 1,
                    ring_index=y,
                    start_angle=start,
                    end_angle=start + MONTH_SPAN,
                )
            )

    arcs: List[EventArc] = []
    groups = group_by_year_month(data, arc_order)
    for ring in rings:
        for m in range(12):
            members = groups.get((ring.year, m + 1))
            if not members:
                continue
            bounds = subdivide_month(
                [r.percentage for r in members], m * MONTH_SPAN, MONTH_SPAN
            )
            outer = boundary_radius if ring.is_outermost else ring.outer_radius
            for pos, (rec, (start, end)) in enumerate(zip(members, bounds)):
                arcs.append(
                    EventArc(
                        year=ring.year,
                        month=m + 1,
                        ring_index=ring.ring_index,
                        position=pos,
                        event=rec,
                        start_angle=start,
                        end_angle=end,
                        inner_radius=ring.inner_radius,
                        outer_radius=outer,
                        emphasized=ring.is_outermost,
                    )
                )

    return RadialLayout(
        first_year=first_year,
        last_year=last_year,
        width=width,
        height=height,
        center=center,
        max_radius=max_radius,
        ring_width=ring_width,
        boundary_radius=boundary_radius,
        rings=tuple(rings),
        sectors=tuple(sectors),
        arcs=tuple(arcs),
    )
