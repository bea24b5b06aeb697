"""The calendar flower component.

``FlowerView`` holds the props handed over by the map layer (aggregates,
selection, filters, dimensions), runs a full render pass whenever they change,
and owns the hover controllers that apply transient effects to the current
scene.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Sequence

from .compute.core.types import EventAggregate, LocationSelection
from .compute.engine import FlowerEngine, RenderPass
from .compute.layout import ArcOrder, RadialLayout
from .config import FlowerConfig
from .interaction.hover import PetalHoverController, RingHoverController
from .render.flower import FlowerRenderer
from .render.html import render_html_document
from .render.scene import Scene
from .render.shell import ShellLayout, Viewport, resolve_shell
from .render.zoom_mirror import ZoomMirrorRenderer


class FlowerView:
    """Stateful flower component.

    The only state carried between render passes is the raw props and the
    hover state owned by the controllers; everything geometric is rebuilt.
    """

    def __init__(
        self,
        data: Sequence[EventAggregate],
        selection: LocationSelection,
        config: Optional[FlowerConfig] = None,
        renderer: Optional[FlowerRenderer] = None,
        mirror_renderer: Optional[ZoomMirrorRenderer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.data: List[EventAggregate] = list(data)
        self.selection = selection
        self.config = config or FlowerConfig()
        self.logger = logger or self.config.logger or logging.getLogger(__name__)
        self.renderer = renderer or FlowerRenderer()
        self.mirror_renderer = mirror_renderer or ZoomMirrorRenderer()

        self.render_pass: Optional[RenderPass] = None
        self.scene: Optional[Scene] = None
        self.ring_hover: Optional[RingHoverController] = None
        self.petal_hover: Optional[PetalHoverController] = None
        self.render()

    @property
    def layout(self) -> RadialLayout:
        return self.render_pass.layout

    @property
    def filtered(self) -> List[EventAggregate]:
        return self.render_pass.filtered

    @property
    def arc_order(self) -> ArcOrder:
        return ArcOrder(self.config.arc_order)

    @property
    def shell(self) -> ShellLayout:
        cfg = self.config
        viewport = None
        if cfg.viewport_width is not None:
            viewport = Viewport(
                width=cfg.viewport_width,
                height=cfg.viewport_height if cfg.viewport_height is not None else cfg.height,
            )
        return resolve_shell(
            cfg.width,
            cfg.height,
            viewport=viewport,
            show_legend=cfg.show_legend,
            breakpoint=cfg.mobile_breakpoint,
        )

    def render(self) -> Scene:
        """Full teardown and rebuild of the drawing surface."""
        engine = FlowerEngine(self.config, self.logger)
        self.render_pass = engine.run(self.data, self.selection)
        self.scene = self.renderer.render(self.render_pass.layout, self.selection.location_code)

        if self.ring_hover is None:
            self.ring_hover = RingHoverController(
                self.scene,
                self.layout,
                self.filtered,
                mirror_renderer=self.mirror_renderer,
                arc_order=self.arc_order,
                logger=self.logger,
            )
            self.petal_hover = PetalHoverController(self.scene)
        else:
            self.ring_hover.arc_order = self.arc_order
            self.ring_hover.rebind(self.scene, self.layout, self.filtered)
            self.petal_hover.rebind(self.scene)
        return self.scene

    def update(
        self,
        data: Optional[Sequence[EventAggregate]] = None,
        selection: Optional[LocationSelection] = None,
        **changes: Any,
    ) -> Scene:
        """Change props and re-render.

        Args:
            data: New aggregates, e.g. after a new location was fetched.
            selection: New location and year span.
            **changes: ``FlowerConfig`` fields to replace (``width``,
                ``event_type_filter``, ``date_range``, ...).

        Raises:
            TypeError: If a change names an unknown config field.
        """
        if data is not None:
            self.data = list(data)
        if selection is not None:
            self.selection = selection
        if changes:
            self.config = dataclasses.replace(self.config, **changes)
        return self.render()

    def hover_ring(self, ring_index: int) -> bool:
        return self.ring_hover.enter(ring_index)

    def leave_ring(self, ring_index: int) -> None:
        self.ring_hover.leave(ring_index)

    def hover_petal(self, index: int) -> None:
        self.petal_hover.enter(index)

    def leave_petal(self, index: int) -> None:
        self.petal_hover.leave(index)

    def mirror_html(self) -> str:
        return self.ring_hover.mirror_html()

    def year_panels(self) -> Dict[int, str]:
        """Mirror content for every ring, keyed by ring index."""
        panels = {}
        for ring in self.layout.rings:
            events = self.render_pass.events_for_year(ring.year)
            panels[ring.ring_index] = self.mirror_renderer.render_panel(
                ring.year, events, self.arc_order
            )
        return panels

    def to_svg(self) -> str:
        return self.scene.to_svg()

    def to_html(self, title: Optional[str] = None, include_script: bool = True) -> str:
        return render_html_document(self, title=title, include_script=include_script)
