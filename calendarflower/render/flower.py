"""Primary renderer for the calendar flower.

Turns a ``RadialLayout`` into a ``Scene``: guideline rings, one group per
year ring (its hit band under its event arcs), the boundary circle, the
decorative petal fringe, month labels and the title. Every call builds a
new scene from scratch, so two calls with the same layout produce identical
output.
"""

from __future__ import annotations

from ..compute.core.types import MONTH_NAMES
from ..compute.layout import MONTH_SPAN, EventArc, RadialLayout
from .palette import PETAL_COLORS, event_color, petal_color
from .scene import Scene, SceneElement
from .svg_utils import annular_sector_path, polar_to_cartesian, polygon_path

GUIDE_EVERY = 5
PETAL_HALF_WIDTH = 12.0
PETAL_OPACITY = 0.4
PETAL_HOVER_OPACITY = 0.7


def ring_group_key(ring_index: int) -> str:
    return f"ring-{ring_index}"


def ring_hit_key(ring_index: int) -> str:
    return f"ring-hit-{ring_index}"


def ring_highlight_key(ring_index: int) -> str:
    return f"ring-highlight-{ring_index}"


def year_label_key(ring_index: int) -> str:
    return f"year-tooltip-{ring_index}"


def petal_key(index: int) -> str:
    return f"petal-{index}"


class FlowerRenderer:
    """Renders the radial calendar as a keyed SVG scene."""

    def __init__(
        self,
        title_font_size: int = 18,
        label_font_size: int = 12,
        font_family: str = "system-ui, -apple-system, sans-serif",
    ):
        self.title_font_size = title_font_size
        self.label_font_size = label_font_size
        self.font_family = font_family

    def render(self, layout: RadialLayout, location_code: str) -> Scene:
        """Build the full scene for one render pass.

        Args:
            layout: Geometry from the radial layout engine.
            location_code: Location shown in the title.

        Returns:
            A new ``Scene``; nothing from previous passes is reused.
        """
        scene = Scene(layout.width, layout.height)
        cx, cy = layout.center

        self._add_gradients(scene)
        scene.add(
            SceneElement(
                "text",
                {
                    "class": "flower-title",
                    "x": cx,
                    "y": 25,
                    "text-anchor": "middle",
                    "font-family": self.font_family,
                    "font-size": f"{self.title_font_size}px",
                    "font-weight": "bold",
                },
                key="title",
                text=f"{location_code} Climate Events ({layout.first_year}-{layout.last_year})",
            )
        )

        scene.add(
            SceneElement(
                "g",
                {"class": "flower", "transform": f"translate({cx:.2f},{cy:.2f})"},
                key="flower",
            )
        )
        self._add_guides(scene, layout)
        self._add_rings(scene, layout)

        # Boundary separates data rings from the decorative fringe.
        scene.add(
            SceneElement(
                "circle",
                {
                    "class": "boundary",
                    "r": layout.boundary_radius,
                    "fill": "none",
                    "stroke": "#ffffff",
                    "stroke-width": 3,
                    "opacity": 0.9,
                },
                key="boundary",
            ),
            parent="flower",
        )
        self._add_petals(scene, layout)
        self._add_month_labels(scene, layout)
        return scene

    def render_svg(self, layout: RadialLayout, location_code: str) -> str:
        return self.render(layout, location_code).to_svg()

    def _add_gradients(self, scene: Scene) -> None:
        defs = SceneElement("defs", key="defs")
        for i, color in enumerate(PETAL_COLORS):
            defs.append(
                SceneElement(
                    "linearGradient",
                    {"x1": "0%", "y1": "0%", "x2": "100%", "y2": "0%"},
                    key=f"petalGradient{i}",
                    children=[
                        SceneElement(
                            "stop",
                            {"offset": "0%", "stop-color": color, "stop-opacity": 0.6},
                        ),
                        SceneElement(
                            "stop",
                            {"offset": "100%", "stop-color": color, "stop-opacity": 0.2},
                        ),
                    ],
                )
            )
        scene.add(defs)

    def _add_guides(self, scene: Scene, layout: RadialLayout) -> None:
        guides = scene.add(SceneElement("g", {"class": "guides"}, key="guides"), parent="flower")
        last = len(layout.rings) - 1
        for ring in layout.rings:
            if ring.ring_index % GUIDE_EVERY and ring.ring_index != last:
                continue
            guides.append(
                SceneElement(
                    "circle",
                    {
                        "class": "guide",
                        "r": ring.outer_radius,
                        "fill": "none",
                        "stroke": "#e0e0e0",
                        "stroke-width": 0.5,
                        "stroke-dasharray": "2,2",
                        "opacity": 0.6,
                    },
                )
            )

    def _add_rings(self, scene: Scene, layout: RadialLayout) -> None:
        # The band sits under the ring's arcs so arc tooltips stay reachable;
        # hover is bound on the group and fires for either child.
        scene.add(SceneElement("g", {"class": "rings"}, key="rings"), parent="flower")
        for ring in layout.rings:
            group_key = ring_group_key(ring.ring_index)
            scene.add(
                SceneElement(
                    "g",
                    {
                        "class": "ring",
                        "data-ring-index": ring.ring_index,
                        "data-year": ring.year,
                        "style": "cursor: pointer",
                    },
                    key=group_key,
                ),
                parent="rings",
            )
            scene.add(
                SceneElement(
                    "circle",
                    {
                        "class": "ring-hit",
                        "r": ring.mid_radius,
                        "fill": "none",
                        "stroke": "transparent",
                        "stroke-width": layout.ring_width,
                        "pointer-events": "stroke",
                        "data-ring-index": ring.ring_index,
                        "data-year": ring.year,
                        "data-outer-radius": ring.outer_radius,
                    },
                    key=ring_hit_key(ring.ring_index),
                ),
                parent=group_key,
            )
        for arc in layout.arcs:
            if arc.span <= 0:
                continue
            scene.add(self._arc_element(arc), parent=ring_group_key(arc.ring_index))

    def _arc_element(self, arc: EventArc) -> SceneElement:
        ev = arc.event
        attrs = {
            "class": "event-arc emphasized" if arc.emphasized else "event-arc",
            "d": annular_sector_path(
                arc.inner_radius, arc.outer_radius, arc.start_angle, arc.end_angle
            ),
            "fill": event_color(ev.event_type),
            "fill-rule": "evenodd",
            "opacity": 0.9 if arc.emphasized else 0.8,
            "stroke": "white",
            "stroke-width": 0.8 if arc.emphasized else 0.3,
            "data-year": arc.year,
            "data-month": arc.month,
            "data-type": ev.event_type.value,
            "data-count": ev.event_count,
            "data-percentage": f"{ev.percentage:g}",
        }
        if arc.emphasized:
            attrs["style"] = "filter: drop-shadow(2px 2px 4px rgba(0,0,0,0.3))"
        tooltip = (
            f"{ev.event_type.value} ({ev.original_type}) in {arc.year}-{arc.month:02d}\n"
            f"Events: {ev.event_count} ({ev.percentage:g}%)\n"
            f"Severity: {ev.severity_label}"
        )
        return SceneElement(
            "path", attrs, key=arc.key, children=[SceneElement("title", text=tooltip)]
        )

    def _add_petals(self, scene: Scene, layout: RadialLayout) -> None:
        scene.add(SceneElement("g", {"class": "petals"}, key="petals"), parent="flower")
        for i in range(12):
            center = i * MONTH_SPAN + MONTH_SPAN / 2
            base_start = polar_to_cartesian(center - PETAL_HALF_WIDTH, layout.boundary_radius)
            tip = polar_to_cartesian(center, layout.petal_tip_radius)
            base_end = polar_to_cartesian(center + PETAL_HALF_WIDTH, layout.boundary_radius)
            scene.add(
                SceneElement(
                    "path",
                    {
                        "class": "petal",
                        "d": polygon_path([base_start, tip, base_end]),
                        "fill": f"url(#petalGradient{i % len(PETAL_COLORS)})",
                        "data-color": petal_color(i),
                        "data-petal-index": i,
                        "stroke": "white",
                        "stroke-width": 0.5,
                        "opacity": PETAL_OPACITY,
                        "style": "filter: drop-shadow(1px 1px 3px rgba(0,0,0,0.2))",
                    },
                    key=petal_key(i),
                ),
                parent="petals",
            )

    def _add_month_labels(self, scene: Scene, layout: RadialLayout) -> None:
        labels = scene.add(SceneElement("g", {"class": "month-labels"}, key="month-labels"))
        cx, cy = layout.center
        for i, name in enumerate(MONTH_NAMES):
            x, y = polar_to_cartesian(i * MONTH_SPAN + MONTH_SPAN / 2, layout.label_radius)
            labels.append(
                SceneElement(
                    "text",
                    {
                        "class": "month-label",
                        "x": cx + x,
                        "y": cy + y,
                        "text-anchor": "middle",
                        "font-family": self.font_family,
                        "font-size": f"{self.label_font_size}px",
                        "font-weight": "bold",
                        "fill": "#333",
                        "style": "text-shadow: 1px 1px 2px rgba(255,255,255,0.8)",
                    },
                    text=name,
                )
            )
