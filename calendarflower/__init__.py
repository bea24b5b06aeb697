"""calendarflower package exports.

Preferred high-level API:
    from calendarflower import render_flower, summarize_layout, FlowerOptions
"""

# High-level API wrappers
from .api import (
    FlowerOptions,
    FlowerReport,
    LayoutOptions,
    RenderOptions,
    build_view,
    render_flower,
    summarize_layout,
)
from .compute.core.types import DateRange, EventAggregate, EventType, LocationSelection
from .view import FlowerView

__version__ = "0.1.0"

__all__ = [
    "render_flower",
    "summarize_layout",
    "build_view",
    "FlowerOptions",
    "LayoutOptions",
    "RenderOptions",
    "FlowerReport",
    "FlowerView",
    "EventAggregate",
    "EventType",
    "DateRange",
    "LocationSelection",
    "__version__",
]
