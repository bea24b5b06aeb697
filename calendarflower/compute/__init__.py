"""Filter stage, radial layout engine and render-pass orchestration."""

from .core.types import (
    DateRange,
    EventAggregate,
    EventType,
    LoadResult,
    LocationSelection,
)
from .engine import FlowerEngine, RenderPass
from .filters import filter_aggregates
from .layout import (
    ArcOrder,
    EventArc,
    MonthSector,
    RadialLayout,
    YearRing,
    compute_layout,
    subdivide_month,
)
