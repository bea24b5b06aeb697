import json

import pandas as pd
import pytest

from calendarflower import __version__
from calendarflower.api import (
    FlowerOptions,
    FlowerReport,
    LayoutOptions,
    RenderOptions,
    _coerce_selection,  # type: ignore
    _to_engine_config,  # type: ignore
    build_view,
    render_flower,
    summarize_layout,
)
from calendarflower.compute.core.types import DateRange, LocationSelection


def _frame():
    return pd.DataFrame(
        [
            {"year": 2018, "month": 1, "event_type": "Drought", "original_type": "D",
             "event_count": 3, "severity": 1.2, "total_events_in_month": 4, "percentage": 75.0},
            {"year": 2018, "month": 1, "event_type": "Flood", "original_type": "F",
             "event_count": 1, "severity": None, "total_events_in_month": 4, "percentage": 25.0},
            {"year": 2019, "month": 7, "event_type": "D&F", "original_type": "D&F",
             "event_count": 2, "severity": 3.0, "total_events_in_month": 2, "percentage": 100.0},
            {"year": 2020, "month": 13, "event_type": "Flood", "original_type": "F",
             "event_count": 1, "severity": 1.0, "total_events_in_month": 1, "percentage": 100.0},
        ]
    )


def test_report_save_and_repr(tmp_path):
    rep = FlowerReport(html="<html>ok</html>", svg="<svg/>", layout={"year_count": 3})

    html_path = tmp_path / "out.html"
    rep.save_html(str(html_path))
    assert html_path.read_text(encoding="utf-8").startswith("<html>")

    json_path = tmp_path / "out.json"
    rep.save_json(str(json_path))
    assert json.loads(json_path.read_text(encoding="utf-8")) == {"year_count": 3}

    # save() by extension
    svg_path = tmp_path / "out.svg"
    rep.save(str(svg_path))
    assert svg_path.read_text(encoding="utf-8") == "<svg/>"

    html2 = tmp_path / "OUT2.HTML"
    rep.save(str(html2))
    assert html2.exists()

    with pytest.raises(ValueError):
        rep.save(str(tmp_path / "out.txt"))

    assert rep._repr_html_().startswith("<html>")


def test__to_engine_config_maps_options():
    opts = FlowerOptions(
        layout=LayoutOptions(
            width=800,
            height=None,
            event_type_filter="Flood",
            date_range={"start": "2018-01-01", "end": None},
            arc_order="event_type",
        ),
        render=RenderOptions(viewport_width=500, viewport_height=900, show_legend=True),
    )
    cfg = _to_engine_config(opts)
    assert cfg.width == 800
    assert cfg.height == 650
    assert cfg.event_type_filter == "Flood"
    assert cfg.arc_order == "event_type"
    assert cfg.viewport_width == 500
    assert cfg.viewport_height == 900
    assert cfg.show_legend is True


def test__coerce_selection_forms():
    sel = LocationSelection("ES", 2000, 2010)
    assert _coerce_selection(sel) is sel
    assert _coerce_selection(("ES", "2000", 2010)) == sel
    assert _coerce_selection({"location_code": "ES", "first_year": 2000, "last_year": 2010}) == sel
    assert _coerce_selection({"country_code": "ES", "first_year": 2000, "last_year": 2010}) == sel


def test__coerce_selection_rejects_invalid_types():
    with pytest.raises(TypeError):
        _coerce_selection("ES")
    with pytest.raises(TypeError):
        _coerce_selection(("ES", 2000))


def test_render_flower_from_pandas():
    rep = render_flower(_frame(), ("ES", 2018, 2020))

    assert isinstance(rep, FlowerReport)
    assert rep.html.startswith("<!DOCTYPE html>")
    assert rep.svg.startswith("<svg")
    assert rep.svg in rep.html
    assert rep.layout["selection"] == {"location_code": "ES", "first_year": 2018, "last_year": 2020}
    assert rep.layout["records"] == {"loaded": 3, "dropped": 1, "filtered": 3}
    assert rep.layout["year_count"] == 3
    assert len(rep.layout["arcs"]) == 3


def test_render_flower_with_filters():
    cfg = FlowerOptions(
        layout=LayoutOptions(
            event_type_filter="DroughtFlood",
            date_range=DateRange(start="2019-01-01"),
        ),
        render=RenderOptions(title="Spain", include_script=False),
    )
    rep = render_flower(_frame(), ("ES", 2018, 2020), config=cfg)
    assert rep.layout["records"]["filtered"] == 1
    assert rep.layout["filters"] == {
        "event_type": "DroughtFlood",
        "date_range": {"start": "2019-01-01", "end": None},
    }
    assert rep.layout["arcs"][0]["original_type"] == "D&F"
    assert "<title>Spain</title>" in rep.html
    assert "<script>" not in rep.html


def test_render_flower_from_records():
    rows = _frame().to_dict(orient="records")
    rep = render_flower(rows, {"location_code": "ES", "first_year": 2018, "last_year": 2019})
    assert rep.layout["year_count"] == 2


def test_render_flower_empty_data_gives_skeleton():
    rep = render_flower([], ("ES", 2000, 2004))
    assert rep.layout["arcs"] == []
    assert len(rep.layout["rings"]) == 5
    assert 'class="ring-hit"' in rep.svg


def test_render_flower_rejects_unsupported_input():
    with pytest.raises(TypeError):
        render_flower("events.csv", ("ES", 2000, 2001))


def test_summarize_layout_is_json_safe():
    out = summarize_layout(_frame(), ("ES", 2018, 2020))
    text = json.dumps(out)
    assert "rings" in json.loads(text)
    assert out["boundary_radius"] > out["rings"][-1]["outer_radius"]


def test_summarize_layout_matches_render():
    frame = _frame()
    assert summarize_layout(frame, ("ES", 2018, 2020)) == render_flower(frame, ("ES", 2018, 2020)).layout


def test_summarize_layout_polars():
    pl = pytest.importorskip("polars")
    df = pl.DataFrame(_frame().to_dict(orient="records"))
    out = summarize_layout(df, ("ES", 2018, 2020))
    assert out["records"]["loaded"] == 3


def test_build_view_supports_hover():
    view = build_view(_frame(), ("ES", 2018, 2020))
    view.hover_ring(0)
    assert "Drought (D): 3" in view.mirror_html()


def test_version():
    assert __version__ == "0.1.0"
