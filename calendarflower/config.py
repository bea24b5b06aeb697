from __future__ import annotations

"""Internal engine configuration for a render pass.

Separated from `calendarflower.api` to avoid circular imports and to keep the
engine's configuration distinct from the public option dataclasses.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

DEFAULT_WIDTH = 600
DEFAULT_HEIGHT = 650
MOBILE_BREAKPOINT = 768


@dataclass
class FlowerConfig:
    """Configuration understood by the render engine (internal).

    Attributes mirror the engine's needs: canvas size, active filters, arc
    ordering, responsive breakpoint and logging.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    event_type_filter: Optional[str] = None
    date_range: Any = None  # DateRange or {"start", "end"} mapping
    arc_order: str = "source"
    # Responsive shell
    viewport_width: Optional[int] = None
    viewport_height: Optional[int] = None
    mobile_breakpoint: int = MOBILE_BREAKPOINT
    show_legend: bool = False
    # Logging
    logger: Optional[logging.Logger] = None
    log_level: int = logging.INFO

    @classmethod
    def from_options(cls, opts: EngineOptions) -> "FlowerConfig":
        """Build engine config from any ``EngineOptions``-compatible object.

        Uses duck-typing to avoid import cycles and keep public/internal models
        decoupled.
        """
        return cls(
            width=int(opts.width or DEFAULT_WIDTH),
            height=int(opts.height or DEFAULT_HEIGHT),
            event_type_filter=opts.event_type_filter,
            date_range=opts.date_range,
            arc_order=str(opts.arc_order),
        )


@runtime_checkable
class EngineOptions(Protocol):
    """Typed view of the options the engine cares about."""

    width: Optional[int]
    height: Optional[int]
    event_type_filter: Optional[str]
    date_range: Any
    arc_order: str
