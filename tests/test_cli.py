"""Tests for the CLI module."""

import json
import os
import tempfile

import pandas as pd
import pytest

from calendarflower.cli import (
    cmd_layout,
    cmd_render,
    create_parser,
    load_data,
    main,
    resolve_selection,
    select_location,
)


def _frame():
    return pd.DataFrame(
        {
            "country_code": ["ES", "ES", "ES", "PT"],
            "year": [2001, 2001, 2003, 1999],
            "month": [2, 2, 11, 5],
            "event_type": ["Drought", "Flood", "DtoF", "Flood"],
            "original_type": ["D", "F", "DtoF", "F"],
            "event_count": [3, 1, 2, 5],
            "severity": [1.5, None, 2.0, 1.0],
            "total_events_in_month": [4, 4, 2, 5],
            "percentage": [75.0, 25.0, 100.0, 100.0],
        }
    )


class TestCLIParser:
    """Tests for CLI argument parsing."""

    def test_parser_render_command(self):
        """Test render command parsing."""
        parser = create_parser()
        args = parser.parse_args(["render", "events.csv", "--location", "ES", "--output", "es.html"])

        assert args.command == "render"
        assert args.file == "events.csv"
        assert args.location == "ES"
        assert args.output == "es.html"
        assert args.first_year is None
        assert args.width == 600
        assert args.height == 650
        assert args.arc_order == "source"

    def test_parser_render_with_options(self):
        """Test render command with all options."""
        parser = create_parser()
        args = parser.parse_args([
            "render", "events.csv",
            "-l", "ES",
            "-o", "es.html",
            "--first-year", "1990",
            "--last-year", "2020",
            "--event-type", "Flood",
            "--start", "2000-01-01",
            "--end", "2010-12-31",
            "--width", "500",
            "--height", "520",
            "--viewport-width", "375",
            "--viewport-height", "667",
            "--arc-order", "event_type",
            "--show-legend",
            "--title", "Spain",
            "--quiet",
            "--verbose",
        ])

        assert args.first_year == 1990
        assert args.last_year == 2020
        assert args.event_type == "Flood"
        assert args.start == "2000-01-01"
        assert args.end == "2010-12-31"
        assert args.width == 500
        assert args.viewport_width == 375
        assert args.arc_order == "event_type"
        assert args.show_legend is True
        assert args.title == "Spain"
        assert args.quiet is True
        assert args.verbose is True

    def test_parser_rejects_unknown_event_type(self):
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["render", "e.csv", "-l", "ES", "-o", "x.html", "--event-type", "Storm"])

    def test_parser_layout_command(self):
        """Test layout command parsing."""
        parser = create_parser()
        args = parser.parse_args(["layout", "events.csv", "--location", "ES"])

        assert args.command == "layout"
        assert args.output is None

    def test_location_required(self):
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["layout", "events.csv"])


class TestLoadData:
    """Tests for data loading functionality."""

    def test_load_csv(self):
        """Test loading CSV file."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False) as f:
            f.write("year,month,event_type\n2001,2,Drought\n2002,3,Flood\n")
            temp_path = f.name

        try:
            df = load_data(temp_path)
            assert len(df) == 2
            assert list(df.columns) == ["year", "month", "event_type"]
        finally:
            os.unlink(temp_path)

    def test_load_json(self, tmp_path):
        path = tmp_path / "events.json"
        _frame().to_json(path, orient="records")
        df = load_data(str(path))
        assert len(df) == 4

    def test_load_nonexistent_file(self):
        """Test loading non-existent file."""
        with pytest.raises(FileNotFoundError):
            load_data("/nonexistent/path/events.csv")

    def test_load_unsupported_format(self):
        """Test loading unsupported file format."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".xyz", delete=False) as f:
            f.write("content")
            temp_path = f.name

        try:
            with pytest.raises(ValueError, match="Unsupported file format"):
                load_data(temp_path)
        finally:
            os.unlink(temp_path)


class TestSelection:
    """Year span and location narrowing."""

    def test_select_location(self):
        df = select_location(_frame(), "ES")
        assert len(df) == 3

    def test_select_location_without_column(self):
        df = _frame().drop(columns=["country_code"])
        assert len(select_location(df, "ES")) == 4

    def test_span_from_data(self):
        args = create_parser().parse_args(["layout", "e.csv", "-l", "ES"])
        sel = resolve_selection(select_location(_frame(), "ES"), args)
        assert (sel.first_year, sel.last_year) == (2001, 2003)

    def test_partial_span(self):
        args = create_parser().parse_args(["layout", "e.csv", "-l", "ES", "--first-year", "1995"])
        sel = resolve_selection(select_location(_frame(), "ES"), args)
        assert (sel.first_year, sel.last_year) == (1995, 2003)

    def test_inverted_span_rejected(self):
        args = create_parser().parse_args(
            ["layout", "e.csv", "-l", "ES", "--first-year", "2005", "--last-year", "2000"]
        )
        with pytest.raises(ValueError, match="after last year"):
            resolve_selection(_frame(), args)

    def test_no_years(self):
        args = create_parser().parse_args(["layout", "e.csv", "-l", "XX"])
        with pytest.raises(ValueError, match="no valid years"):
            resolve_selection(select_location(_frame(), "XX"), args)


class TestCLICommands:
    """Tests for CLI command execution."""

    @pytest.fixture
    def sample_csv(self):
        """Create a sample CSV file for testing."""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".csv", delete=False) as f:
            _frame().to_csv(f.name, index=False)
            yield f.name
        os.unlink(f.name)

    def test_cmd_render_creates_html(self, sample_csv, tmp_path):
        """Test that render command creates an HTML file."""
        output_path = tmp_path / "es.html"
        args = create_parser().parse_args(
            ["render", sample_csv, "-l", "ES", "-o", str(output_path), "--quiet"]
        )

        result = cmd_render(args)

        assert result == 0
        content = output_path.read_text(encoding="utf-8")
        assert "<!DOCTYPE html>" in content
        assert "ES Climate Events (2001-2003)" in content
        assert content.count('class="ring-hit"') == 3

    def test_cmd_render_svg_output(self, sample_csv, tmp_path):
        output_path = tmp_path / "es.svg"
        args = create_parser().parse_args(
            ["render", sample_csv, "-l", "ES", "-o", str(output_path), "--quiet"]
        )
        assert cmd_render(args) == 0
        assert output_path.read_text(encoding="utf-8").startswith("<svg")

    def test_cmd_render_bad_extension(self, sample_csv, tmp_path, capsys):
        args = create_parser().parse_args(
            ["render", sample_csv, "-l", "ES", "-o", str(tmp_path / "es.png"), "--quiet"]
        )
        assert cmd_render(args) == 1
        assert "Error saving flower" in capsys.readouterr().err

    def test_cmd_render_progress_output(self, sample_csv, tmp_path, capsys):
        output_path = tmp_path / "es.html"
        args = create_parser().parse_args(["render", sample_csv, "-l", "ES", "-o", str(output_path)])
        assert cmd_render(args) == 0
        out = capsys.readouterr().out
        assert "Loading data from" in out
        assert "Flower saved to" in out

    def test_cmd_render_invalid_file(self, capsys):
        """Test render command with invalid file."""
        args = create_parser().parse_args(
            ["render", "/nonexistent/events.csv", "-l", "ES", "-o", "/tmp/es.html", "--quiet"]
        )

        assert cmd_render(args) == 1
        assert "Error:" in capsys.readouterr().err

    def test_cmd_layout_outputs_json(self, sample_csv, capsys):
        """Test that layout command outputs JSON."""
        args = create_parser().parse_args(["layout", sample_csv, "-l", "ES", "--quiet"])

        assert cmd_layout(args) == 0

        layout = json.loads(capsys.readouterr().out)
        assert layout["selection"]["location_code"] == "ES"
        assert layout["year_count"] == 3
        assert len(layout["arcs"]) == 3

    def test_cmd_layout_with_filter(self, sample_csv, capsys):
        args = create_parser().parse_args(
            ["layout", sample_csv, "-l", "ES", "--event-type", "Flood", "--quiet"]
        )
        assert cmd_layout(args) == 0
        layout = json.loads(capsys.readouterr().out)
        assert [a["event_type"] for a in layout["arcs"]] == ["Flood"]

    def test_cmd_layout_saves_to_file(self, sample_csv, tmp_path):
        """Test that layout command saves to file."""
        output_path = tmp_path / "layout.json"
        args = create_parser().parse_args(
            ["layout", sample_csv, "-l", "ES", "-o", str(output_path), "--quiet"]
        )

        assert cmd_layout(args) == 0
        with open(output_path) as f:
            layout = json.load(f)
        assert layout["records"]["loaded"] == 3


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "calendarflower" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "calendarflower 0.1.0" in capsys.readouterr().out

    def test_main_layout(self, tmp_path, capsys):
        path = tmp_path / "events.csv"
        _frame().to_csv(path, index=False)
        assert main(["layout", str(path), "-l", "PT", "--quiet"]) == 0
        layout = json.loads(capsys.readouterr().out)
        assert layout["first_year"] == 1999


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
