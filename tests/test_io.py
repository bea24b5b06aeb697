"""Tests for loading aggregates from frames and record iterables."""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
import pytest

from calendarflower.compute.core.types import EventAggregate, EventType
from calendarflower.io import iter_records, load_aggregates


def _rows():
    return [
        {"year": 2020, "month": 1, "event_type": "Drought", "original_type": "D",
         "event_count": 3, "severity": 1.5, "total_events_in_month": 4, "percentage": 75.0},
        {"year": 2020, "month": 1, "event_type": "Flood", "original_type": "F",
         "event_count": 1, "severity": None, "total_events_in_month": 4, "percentage": 25.0},
    ]


class TestIterRecords:
    """Input adapters."""

    def test_list_of_mappings(self):
        rows = list(iter_records(_rows()))
        assert len(rows) == 2
        assert rows[0]["event_type"] == "Drought"

    def test_pandas_frame_keeps_row_order(self):
        df = pd.DataFrame(_rows())
        rows = list(iter_records(df))
        assert [r["event_type"] for r in rows] == ["Drought", "Flood"]

    def test_polars_frame(self):
        pl = pytest.importorskip("polars")
        df = pl.DataFrame(_rows())
        rows = list(iter_records(df))
        assert [r["original_type"] for r in rows] == ["D", "F"]
        rows = list(iter_records(df.lazy()))
        assert len(rows) == 2

    def test_event_aggregates_pass_through(self):
        ev = EventAggregate(2020, 2, EventType.DTOF, "DtoF", 2, None, 2, 100.0)
        rows = list(iter_records([ev]))
        assert rows[0]["event_type"] == "DtoF"

    def test_dataclass_rows(self):
        @dataclass
        class Row:
            year: int
            month: int
            event_type: str

        rows = list(iter_records([Row(2020, 5, "Flood")]))
        assert rows == [{"year": 2020, "month": 5, "event_type": "Flood"}]

    def test_none_yields_nothing(self):
        assert list(iter_records(None)) == []

    @pytest.mark.parametrize("bad", ["events.csv", {"year": 2020}, 42])
    def test_unsupported_inputs(self, bad):
        with pytest.raises(TypeError):
            list(iter_records(bad))

    def test_unsupported_item(self):
        with pytest.raises(TypeError, match="Unsupported record type"):
            list(iter_records([("2020", "1", "Flood")]))


class TestLoadAggregates:
    """Conversion to EventAggregate with per-row resilience."""

    def test_loads_valid_rows(self):
        result = load_aggregates(_rows())
        assert not result.has_warnings()
        assert [r.event_type for r in result.records] == [EventType.DROUGHT, EventType.FLOOD]
        assert result.records[1].severity is None

    def test_pandas_nan_and_numpy_types(self):
        df = pd.DataFrame(_rows())
        df.loc[1, "severity"] = np.nan
        result = load_aggregates(df)
        assert result.records[0].year == 2020
        assert isinstance(result.records[0].event_count, int)
        assert result.records[1].severity is None
        assert result.records[1].severity_label == "N/A"

    def test_malformed_rows_dropped_with_warning(self, caplog):
        rows = _rows() + [
            {"year": 2020, "month": 13, "event_type": "Flood"},
            {"year": 2020, "month": 2, "event_type": "Tornado"},
        ]
        with caplog.at_level(logging.WARNING):
            result = load_aggregates(rows)
        assert len(result.records) == 2
        assert result.dropped == 2
        assert result.warnings[0].startswith("row 2:")
        assert result.warnings[1].startswith("row 3:")
        assert "dropping aggregate" in caplog.text

    def test_custom_logger(self, caplog):
        logger = logging.getLogger("flower.test")
        with caplog.at_level(logging.WARNING, logger="flower.test"):
            load_aggregates([{"year": "x", "month": 1, "event_type": "Flood"}], logger=logger)
        assert any(rec.name == "flower.test" for rec in caplog.records)

    def test_malformed_numbers_are_kept(self):
        result = load_aggregates(
            [{"year": 2020, "month": 1, "event_type": "Flood", "percentage": "lots"}]
        )
        assert result.dropped == 0
        assert result.records[0].percentage == 0.0

    def test_empty_input(self):
        result = load_aggregates([])
        assert result.records == []
        assert result.warnings == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
