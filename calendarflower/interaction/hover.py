"""Hover state machines for the flower.

Ring hover and petal hover are independent. Ring hover is mutually exclusive
across rings (at most one ring is active) and drives three transient effects:
the 2px ring highlight, the year label at the center, and the zoom mirror.
All transient scene elements are keyed by ring index, so ``leave`` can undo
``enter`` even when the scene was rebuilt in between.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Set

from ..compute.core.types import EventAggregate
from ..compute.layout import ArcOrder, RadialLayout
from ..render.flower import (
    PETAL_HOVER_OPACITY,
    PETAL_OPACITY,
    petal_key,
    ring_group_key,
    ring_highlight_key,
    year_label_key,
)
from ..render.scene import Scene, SceneElement
from ..render.zoom_mirror import ZoomMirrorRenderer

HIGHLIGHT_STROKE = "#333"
HIGHLIGHT_OPACITY = 0.3
HIGHLIGHT_WIDTH = 2
YEAR_LABEL_COLOR = "#EF5350"


class HoverState(Enum):
    IDLE = "idle"
    HOVERED = "hovered"


@dataclass(frozen=True)
class MirrorContent:
    """What the zoom mirror shows for the hovered year."""

    year: int
    events: tuple
    html: str


class RingHoverController:
    """Idle/Hovered state machine shared by all rings of one flower.

    Attributes:
        state: Current ``HoverState``.
        active_ring: Ring index under the pointer, ``None`` when idle.
        mirror: Zoom mirror content, ``None`` when showing the placeholder.
    """

    def __init__(
        self,
        scene: Scene,
        layout: RadialLayout,
        data: Sequence[EventAggregate],
        mirror_renderer: Optional[ZoomMirrorRenderer] = None,
        arc_order: ArcOrder = ArcOrder.SOURCE,
        logger: Optional[logging.Logger] = None,
    ):
        self.scene = scene
        self.layout = layout
        self.data = list(data)
        self.mirror_renderer = mirror_renderer or ZoomMirrorRenderer()
        self.arc_order = ArcOrder(arc_order)
        self.logger = logger or logging.getLogger(__name__)
        self.state = HoverState.IDLE
        self.active_ring: Optional[int] = None
        self.mirror: Optional[MirrorContent] = None

    def events_for_ring(self, ring_index: int) -> List[EventAggregate]:
        """All filtered events of the ring's year, across months."""
        year = self.layout.first_year + ring_index
        return [r for r in self.data if r.year == year]

    def enter(self, ring_index: int) -> bool:
        """Pointer entered the ring group (its band or one of its arcs).

        Returns:
            ``False`` if the ring does not exist in the current layout.
        """
        if not 0 <= ring_index < len(self.layout.rings):
            self.logger.debug("ignoring hover on unknown ring %d", ring_index)
            return False
        if self.active_ring == ring_index:
            return True
        if self.active_ring is not None:
            self.leave(self.active_ring)

        self._apply(ring_index)
        self.state = HoverState.HOVERED
        self.active_ring = ring_index
        return True

    def leave(self, ring_index: int) -> None:
        """Pointer left the ring group; undoes every ``enter`` effect."""
        self.scene.remove(year_label_key(ring_index))
        self.scene.remove(ring_highlight_key(ring_index))
        if self.active_ring == ring_index:
            self.state = HoverState.IDLE
            self.active_ring = None
            self.mirror = None

    def rebind(
        self,
        scene: Scene,
        layout: RadialLayout,
        data: Sequence[EventAggregate],
    ) -> None:
        """Attach to a freshly rendered scene.

        An active hover is re-applied when its ring still exists in the new
        layout and dropped otherwise.
        """
        active = self.active_ring
        self.scene = scene
        self.layout = layout
        self.data = list(data)
        self.state = HoverState.IDLE
        self.active_ring = None
        self.mirror = None
        if active is not None and 0 <= active < len(layout.rings):
            self.enter(active)

    def mirror_html(self) -> str:
        if self.mirror is None:
            return self.mirror_renderer.render_placeholder()
        return self.mirror.html

    def _apply(self, ring_index: int) -> None:
        ring = self.layout.rings[ring_index]
        highlight_key = ring_highlight_key(ring_index)
        if self.scene.has(ring_group_key(ring_index)) and not self.scene.has(highlight_key):
            self.scene.add(
                SceneElement(
                    "circle",
                    {
                        "class": "ring-highlight",
                        "r": ring.outer_radius,
                        "fill": "none",
                        "stroke": HIGHLIGHT_STROKE,
                        "stroke-width": HIGHLIGHT_WIDTH,
                        "opacity": HIGHLIGHT_OPACITY,
                        "pointer-events": "none",
                    },
                    key=highlight_key,
                ),
                parent=ring_group_key(ring_index),
            )

        label_key = year_label_key(ring_index)
        if not self.scene.has(label_key):
            self.scene.add(
                SceneElement(
                    "text",
                    {
                        "class": "year-label",
                        "x": 0,
                        "y": 0,
                        "text-anchor": "middle",
                        "font-size": "14px",
                        "font-weight": "bold",
                        "fill": YEAR_LABEL_COLOR,
                        "pointer-events": "none",
                    },
                    key=label_key,
                    text=f"Year: {ring.year}",
                ),
                parent="flower",
            )

        events = self.events_for_ring(ring_index)
        self.mirror = MirrorContent(
            year=ring.year,
            events=tuple(events),
            html=self.mirror_renderer.render_panel(ring.year, events, self.arc_order),
        )
        self.logger.debug("hover ring %d (%d): %d events", ring_index, ring.year, len(events))


class PetalHoverController:
    """Per-petal opacity toggle, independent of ring hover."""

    def __init__(self, scene: Scene):
        self.scene = scene
        self.hovered: Set[int] = set()

    def enter(self, index: int) -> None:
        petal = self.scene.get(petal_key(index))
        if petal is None:
            return
        petal.set(opacity=PETAL_HOVER_OPACITY)
        self.hovered.add(index)

    def leave(self, index: int) -> None:
        petal = self.scene.get(petal_key(index))
        if petal is not None:
            petal.set(opacity=PETAL_OPACITY)
        self.hovered.discard(index)

    def is_hovered(self, index: int) -> bool:
        return index in self.hovered

    def rebind(self, scene: Scene) -> None:
        hovered = sorted(self.hovered)
        self.scene = scene
        self.hovered = set()
        for index in hovered:
            self.enter(index)
