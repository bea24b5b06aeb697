"""SVG zoom mirror renderer for the hovered year.

The mirror is a small fixed-size donut showing one year's twelve months with
the same proportional subdivision as the main flower, followed by a per
category event count breakdown.
"""

from __future__ import annotations

import html as _html
from collections import OrderedDict
from typing import Sequence

from ..compute.core.types import EventAggregate
from ..compute.layout import MONTH_SPAN, ArcOrder, group_by_year_month, subdivide_month
from .palette import event_color
from .svg_utils import annular_sector_path, svg_empty

PLACEHOLDER_TEXT = "Hover over a ring"
NO_EVENTS_TEXT = "No events"


def summarize_counts(events: Sequence[EventAggregate]) -> "OrderedDict[str, int]":
    """Sum ``event_count`` per ``"{event_type} ({original_type})"`` key.

    Keys keep the order in which they first appear in ``events``.
    """
    counts: "OrderedDict[str, int]" = OrderedDict()
    for ev in events:
        counts[ev.breakdown_key] = counts.get(ev.breakdown_key, 0) + ev.event_count
    return counts


class ZoomMirrorRenderer:
    """Renders the magnified single-year ring and its text breakdown."""

    def __init__(self):
        self.width = 80
        self.height = 80
        self.cx = 40
        self.cy = 40
        self.outer_radius = 25
        self.band_width = 8

    @property
    def inner_radius(self) -> float:
        return self.outer_radius - self.band_width

    def render_ring(
        self, events: Sequence[EventAggregate], order: ArcOrder = ArcOrder.SOURCE
    ) -> str:
        """Generate the mirror donut for one year's events.

        Args:
            events: All filtered events of the hovered year, any month.
            order: Arc order inside each month, as on the main flower.

        Returns:
            SVG string with a background band and one arc per event share.
        """
        # Background band keeps the ring visible for months without data
        background = f"""
            <circle r="{self.outer_radius - self.band_width / 2:g}" fill="none"
                    stroke="#e9ecef" stroke-width="{self.band_width}"
                    class="zoom-background"/>"""

        paths = []
        for (_, month), members in group_by_year_month(events, order).items():
            bounds = subdivide_month(
                [ev.percentage for ev in members], (month - 1) * MONTH_SPAN, MONTH_SPAN
            )
            for ev, (start, end) in zip(members, bounds):
                if end <= start:
                    continue
                arc_path = annular_sector_path(self.inner_radius, self.outer_radius, start, end)
                paths.append(
                    f"""
            <path d="{arc_path}" fill="{event_color(ev.event_type)}" fill-rule="evenodd"
                  opacity="0.8" stroke="white" stroke-width="0.5"
                  class="zoom-arc" data-month="{month}"
                  data-type="{ev.event_type.value}"
                  data-percentage="{ev.percentage:g}"/>"""
                )

        return f"""
        <svg class="zoom-ring-svg" viewBox="0 0 {self.width} {self.height}"
             width="{self.width}" height="{self.height}"
             xmlns="http://www.w3.org/2000/svg">
            <g transform="translate({self.cx}, {self.cy})">
                {background}
                {"".join(paths)}
            </g>
        </svg>
        """

    def render_breakdown(self, events: Sequence[EventAggregate]) -> str:
        counts = summarize_counts(events)
        if not counts:
            rows = f'<div class="zoom-event-row">{NO_EVENTS_TEXT}</div>'
        else:
            rows = "".join(
                f'<div class="zoom-event-row">{_html.escape(key)}: {count}</div>'
                for key, count in counts.items()
            )
        return f'<div class="zoom-events-text">{rows}</div>'

    def render_panel(
        self,
        year: int,
        events: Sequence[EventAggregate],
        order: ArcOrder = ArcOrder.SOURCE,
    ) -> str:
        """Mirror content shown while ``year`` is hovered."""
        return f"""
        <div class="zoom-content" data-year="{year}">
            <div class="zoom-year-text">Year: {year}</div>
            {self.render_ring(events, order)}
            {self.render_breakdown(events)}
        </div>
        """

    def render_placeholder(self) -> str:
        """Mirror content shown when no ring is hovered."""
        return f"""
        <div class="zoom-content">
            {svg_empty("zoom-ring-svg", self.width, self.height, aria_label="zoom view")}
            <div class="zoom-instruction">{PLACEHOLDER_TEXT}</div>
        </div>
        """
