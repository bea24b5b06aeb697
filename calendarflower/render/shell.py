"""Responsive presentation shell.

Decides container dimensions and where the legend goes. It never changes the
flower's layout math: the layout always uses the configured width/height, the
shell only sizes the container and places the auxiliary panels.
"""

from __future__ import annotations

import html as _html
from dataclasses import dataclass
from typing import Optional

from ..compute.core.types import EventType
from ..config import MOBILE_BREAKPOINT
from .palette import EVENT_COLORS, legend_description

MOBILE_SIDE_MARGIN = 40
MOBILE_HEIGHT_RATIO = 0.7


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int


@dataclass(frozen=True)
class ShellLayout:
    """Container decisions for one render.

    Attributes:
        width: Container width in pixels.
        height: Container height in pixels.
        is_mobile: Whether the viewport is below the mobile breakpoint.
        legend_mode: ``"inline"`` beside the flower or ``"toggle"`` behind a
            button.
        legend_visible: Whether the legend is currently shown.
    """

    width: float
    height: float
    is_mobile: bool
    legend_mode: str
    legend_visible: bool


def resolve_shell(
    width: int,
    height: int,
    viewport: Optional[Viewport] = None,
    show_legend: bool = False,
    breakpoint: int = MOBILE_BREAKPOINT,
) -> ShellLayout:
    """Pick container size and legend placement for a viewport.

    Without a viewport the desktop layout is assumed.
    """
    is_mobile = viewport is not None and viewport.width < breakpoint
    if not is_mobile:
        return ShellLayout(
            width=width,
            height=height,
            is_mobile=False,
            legend_mode="inline",
            legend_visible=True,
        )
    return ShellLayout(
        width=min(width, viewport.width - MOBILE_SIDE_MARGIN),
        height=min(height, viewport.height * MOBILE_HEIGHT_RATIO),
        is_mobile=True,
        legend_mode="toggle",
        legend_visible=bool(show_legend),
    )


class LegendRenderer:
    """Renders the event type legend, inline or as a mobile overlay."""

    def render(self, shell: ShellLayout) -> str:
        if shell.legend_mode == "inline":
            return self._render_panel("external-legend", compact=False)
        toggle = (
            '<button type="button" class="legend-toggle" '
            f'aria-expanded="{"true" if shell.legend_visible else "false"}">Legend</button>'
        )
        overlay = self._render_panel(
            "external-legend mobile-overlay", compact=True, hidden=not shell.legend_visible
        )
        return toggle + overlay

    def _render_panel(self, css_class: str, compact: bool, hidden: bool = False) -> str:
        items = []
        for et in EventType:
            items.append(
                f"""
            <div class="legend-item" data-type="{et.value}">
                <span class="legend-swatch" style="background-color: {EVENT_COLORS[et]}"></span>
                <span class="legend-label">{_html.escape(legend_description(et, compact=compact))}</span>
            </div>"""
            )
        note = "" if compact else '<div class="legend-note">Arc size = % of events</div>'
        return f"""
        <div class="{css_class}"{" hidden" if hidden else ""}>
            <div class="legend-title">Event Types</div>
            {"".join(items)}
            {note}
        </div>
        """
