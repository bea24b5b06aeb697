"""High-level public API for calendarflower.

This module exposes two primary entry points that are safe to use from
applications and notebooks:

- `render_flower`: Lays out and renders the calendar flower for one location
  and returns a self-contained HTML document alongside the SVG and a
  JSON-friendly geometry summary.
- `summarize_layout`: Computes the same layout but returns only the
  machine-readable summary mapping (no HTML).

Both accept in-memory aggregates: a pandas or polars DataFrame, or an
iterable of mappings / `EventAggregate` records.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

from .compute.core.types import DateRange, LocationSelection
from .config import DEFAULT_HEIGHT, DEFAULT_WIDTH
from .config import FlowerConfig as _EngineFlowerConfig
from .io import load_aggregates
from .view import FlowerView


@dataclass
class FlowerReport:
    html: str
    svg: str
    layout: Mapping[str, Any]

    """Container for a rendered flower and its geometry.

    Attributes:
        html: The full HTML document (self-contained, with hover script).
        svg: The flower SVG alone.
        layout: JSON-safe mapping with the selection, filter counts, rings and
            arcs, suitable for programmatic checks.
    """

    def save_html(self, path: str) -> None:
        """Write the HTML document to disk.

        Args:
            path: Destination file path. Parent directories must exist.
        """
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.html)

    def save_svg(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.svg)

    def save_json(self, path: str) -> None:
        """Write the layout mapping to a JSON file.

        Args:
            path: Destination file path. Parent directories must exist.
        """
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.layout, f, ensure_ascii=False, indent=2)

    def save(self, path: str) -> None:
        """Save the report based on the file extension.

        ``.html`` writes the document, ``.svg`` the bare flower and ``.json``
        the layout mapping.

        Raises:
            ValueError: If the extension is not one of ``.html``, ``.svg`` or
                ``.json``.
        """
        ext = os.path.splitext(path)[1].lower()
        if ext == ".html":
            self.save_html(path)
        elif ext == ".svg":
            self.save_svg(path)
        elif ext == ".json":
            self.save_json(path)
        else:
            raise ValueError(f"Unknown extension for FlowerReport.save(): {ext}")

    # Jupyter-friendly inline display
    def _repr_html_(self) -> str:  # pragma: no cover - visual
        return self.html


@dataclass
class LayoutOptions:
    """Options that change the flower's geometry or working dataset.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        event_type_filter: Keep only this category (exact match).
        date_range: Keep only months fully inside this range; a
            ``DateRange`` or a ``{"start", "end"}`` mapping of ISO dates.
        arc_order: ``"source"`` keeps the input order of a month's arcs,
            ``"event_type"`` sorts them by category.
    """

    width: Optional[int] = DEFAULT_WIDTH
    height: Optional[int] = DEFAULT_HEIGHT
    event_type_filter: Optional[str] = None
    date_range: Optional[Union[DateRange, Mapping[str, str]]] = None
    arc_order: str = "source"


@dataclass
class RenderOptions:
    """Options for the HTML shell around the flower.

    Attributes:
        title: Document title; defaults to the flower title.
        viewport_width: Width of the viewing device, enables the mobile
            layout below the breakpoint. ``None`` assumes desktop.
        viewport_height: Height of the viewing device.
        show_legend: Whether the mobile legend overlay starts open.
        include_script: Whether to embed the hover script.
    """

    title: Optional[str] = None
    viewport_width: Optional[int] = None
    viewport_height: Optional[int] = None
    show_legend: bool = False
    include_script: bool = True


@dataclass
class FlowerOptions:
    """High-level configuration passed to :func:`render_flower`.

    Attributes:
        layout: Geometry and filter knobs; see :class:`LayoutOptions`.
        render: Shell knobs; see :class:`RenderOptions`.
    """

    layout: LayoutOptions = field(default_factory=LayoutOptions)
    render: RenderOptions = field(default_factory=RenderOptions)
    logger: Optional[logging.Logger] = None


def _to_engine_config(opts: FlowerOptions) -> _EngineFlowerConfig:
    """Translate high-level options into the internal engine configuration."""
    cfg = _EngineFlowerConfig.from_options(opts.layout)
    cfg.viewport_width = opts.render.viewport_width
    cfg.viewport_height = opts.render.viewport_height
    cfg.show_legend = opts.render.show_legend
    cfg.logger = opts.logger
    return cfg


def _coerce_selection(
    selection: Union[LocationSelection, Mapping[str, Any], tuple],
) -> LocationSelection:
    """Accept a ``LocationSelection``, a mapping or a ``(code, first, last)`` tuple.

    Raises:
        TypeError: If the object is not one of the supported forms.
    """
    if isinstance(selection, LocationSelection):
        return selection
    if isinstance(selection, Mapping):
        code = selection.get("location_code", selection.get("country_code"))
        return LocationSelection(
            location_code=str(code),
            first_year=int(selection["first_year"]),
            last_year=int(selection["last_year"]),
        )
    if isinstance(selection, tuple) and len(selection) == 3:
        code, first, last = selection
        return LocationSelection(str(code), int(first), int(last))
    raise TypeError(
        "Unsupported selection. Provide a LocationSelection, a mapping with location_code/first_year/last_year, or a (code, first_year, last_year) tuple."
    )


def _prepare(
    data: Any,
    selection: Union[LocationSelection, Mapping[str, Any], tuple],
    opts: FlowerOptions,
) -> Tuple[FlowerView, int]:
    cfg = _to_engine_config(opts)
    loaded = load_aggregates(data, logger=cfg.logger)
    view = FlowerView(loaded.records, _coerce_selection(selection), config=cfg)
    return view, loaded.dropped


def build_view(
    data: Any,
    selection: Union[LocationSelection, Mapping[str, Any], tuple],
    config: Optional[FlowerOptions] = None,
) -> FlowerView:
    """Load the aggregates and mount an interactive :class:`FlowerView`.

    Use this instead of :func:`render_flower` to drive hover or prop changes
    from Python before exporting.
    """
    view, _ = _prepare(data, selection, config or FlowerOptions())
    return view


def _layout_summary(view: FlowerView, dropped: int = 0) -> dict:
    sel = view.selection
    summary = {
        "selection": {
            "location_code": sel.location_code,
            "first_year": sel.first_year,
            "last_year": sel.last_year,
        },
        "records": {
            "loaded": len(view.data),
            "dropped": dropped,
            "filtered": len(view.filtered),
        },
        "filters": {
            "event_type": view.config.event_type_filter,
            "date_range": _date_range_dict(view.config.date_range),
        },
    }
    summary.update(view.layout.to_dict())
    return summary


def _date_range_dict(value: Any) -> Optional[dict]:
    dr = DateRange.coerce(value)
    if dr is None:
        return None
    return {"start": dr.start, "end": dr.end}


def render_flower(
    data: Any,
    selection: Union[LocationSelection, Mapping[str, Any], tuple],
    config: Optional[FlowerOptions] = None,
) -> FlowerReport:
    """Lay out and render the calendar flower for one location.

    Args:
        data: Event aggregates for the selected location. Supported:
            - ``pandas.DataFrame`` or ``polars.DataFrame``/``LazyFrame``
            - Iterable of mappings or ``EventAggregate`` records
        selection: Location code and year span, as emitted by the map layer.
        config: Optional configuration overriding layout/render defaults.

    Returns:
        A :class:`FlowerReport` with the HTML, the SVG and the layout mapping.

    Raises:
        TypeError: If ``data`` or ``selection`` is not of a supported type.
    """
    opts = config or FlowerOptions()
    view, dropped = _prepare(data, selection, opts)
    html = view.to_html(title=opts.render.title, include_script=opts.render.include_script)
    return FlowerReport(html=html, svg=view.to_svg(), layout=_layout_summary(view, dropped))


def summarize_layout(
    data: Any,
    selection: Union[LocationSelection, Mapping[str, Any], tuple],
    config: Optional[FlowerOptions] = None,
) -> Mapping[str, Any]:
    """Compute the layout only and return a JSON-safe mapping.

    This is the programmatic counterpart to :func:`render_flower` for code
    paths that do not need the HTML document.
    """
    view, dropped = _prepare(data, selection, config or FlowerOptions())
    return _layout_summary(view, dropped)
