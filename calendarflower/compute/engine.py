"""Render-pass orchestration.

A render pass runs the filter stage and then the radial layout engine over
the current props. Passes are synchronous and stateless: the same inputs
always produce the same pass.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..config import FlowerConfig
from .core.types import EventAggregate, LocationSelection
from .filters import filter_aggregates
from .layout import ArcOrder, RadialLayout, compute_layout


@dataclass(frozen=True)
class RenderPass:
    """Output of one pass through the filter stage and layout engine.

    Attributes:
        selection: Location and year span the pass was computed for.
        filtered: Working dataset after the filter stage, in source order.
        layout: Geometry for the primary renderer.
        duration: Time taken for the pass in seconds.
    """

    selection: LocationSelection
    filtered: List[EventAggregate]
    layout: RadialLayout
    duration: float = 0.0

    def events_for_year(self, year: int) -> List[EventAggregate]:
        """All filtered events of one year, across months, in source order."""
        return [r for r in self.filtered if r.year == year]


class FlowerEngine:
    """Runs the filter stage and layout engine for a selection.

    Attributes:
        config: Engine configuration (size, filters, arc order).
        logger: A logger instance for logging messages.
    """

    def __init__(
        self,
        config: Optional[FlowerConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initializes the FlowerEngine.

        Args:
            config: Engine configuration. Defaults to ``FlowerConfig()``.
            logger: An optional logger instance. If not provided, the config's
                logger or a module logger is used.
        """
        self.config = config or FlowerConfig()
        self.logger = logger or self.config.logger or logging.getLogger(__name__)

    def run(
        self, data: Sequence[EventAggregate], selection: LocationSelection
    ) -> RenderPass:
        """Compute one render pass.

        Args:
            data: Raw aggregates for the selected location.
            selection: Location code and year span to lay out.

        Returns:
            A ``RenderPass`` with the filtered dataset and its layout.
        """
        start_time = time.time()
        cfg = self.config

        filtered = filter_aggregates(data, cfg.event_type_filter, cfg.date_range)
        self.logger.debug(
            "filter stage kept %d of %d aggregates (event_type=%r, date_range=%r)",
            len(filtered),
            len(data),
            cfg.event_type_filter,
            cfg.date_range,
        )

        layout = compute_layout(
            selection.first_year,
            selection.last_year,
            cfg.width,
            cfg.height,
            filtered,
            arc_order=ArcOrder(cfg.arc_order),
        )

        outside = sum(
            1
            for r in filtered
            if not selection.first_year <= r.year <= selection.last_year
        )
        if outside:
            self.logger.debug(
                "%d aggregates fall outside %d-%d and produce no arcs",
                outside,
                selection.first_year,
                selection.last_year,
            )

        duration = time.time() - start_time
        self.logger.log(
            cfg.log_level,
            "%s: %d rings, %d arcs from %d events in %.3fs",
            selection.location_code,
            len(layout.rings),
            len(layout.arcs),
            sum(r.event_count for r in filtered),
            duration,
        )
        return RenderPass(
            selection=selection, filtered=filtered, layout=layout, duration=duration
        )
