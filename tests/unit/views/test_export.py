"""Tests for figure export functionality."""

import sys
from unittest.mock import MagicMock, patch

import altair as alt
import pytest

from student_growth.core.enums import OutputFormat
from student_growth.core.errors import ExportError
from student_growth.views.export import FigureExporter


@pytest.fixture
def figure() -> alt.Chart:
    data = alt.Data(values=[{"x": "WS 2015/16", "y": 1.0}, {"x": "WS 2016/17", "y": 2.0}])
    return alt.Chart(data).mark_line().encode(x="x:N", y="y:Q")


@pytest.fixture
def vl_convert() -> MagicMock:
    module = MagicMock()
    module.vegalite_to_png.return_value = b"\x89PNG"
    module.vegalite_to_svg.return_value = "<svg></svg>"
    return module


class TestFigureExporter:
    """Test FigureExporter class."""

    def test_export_svg(self, figure: alt.Chart, vl_convert: MagicMock) -> None:
        """Test SVG export returns encoded markup."""
        with patch.dict(sys.modules, {"vl_convert": vl_convert}):
            result = FigureExporter().export(figure, OutputFormat.SVG)

        assert result == b"<svg></svg>"
        vl_convert.vegalite_to_svg.assert_called_once()

    def test_export_png_scale_from_dpi(self, figure: alt.Chart, vl_convert: MagicMock) -> None:
        """Test PNG export passes the DPI as scale factor."""
        with patch.dict(sys.modules, {"vl_convert": vl_convert}):
            result = FigureExporter().export(figure, OutputFormat.PNG, dpi=192)

        assert result == b"\x89PNG"
        assert vl_convert.vegalite_to_png.call_args.kwargs["scale"] == pytest.approx(2.0)

    def test_missing_library(self, figure: alt.Chart) -> None:
        """Test that a missing vl-convert raises ExportError."""
        with patch.dict(sys.modules, {"vl_convert": None}), pytest.raises(ExportError) as exc_info:
            FigureExporter().export(figure, OutputFormat.SVG)

        assert "not installed" in exc_info.value.message

    def test_conversion_failure_wrapped(self, figure: alt.Chart, vl_convert: MagicMock) -> None:
        """Test that converter errors are wrapped in ExportError."""
        vl_convert.vegalite_to_png.side_effect = RuntimeError("renderer crashed")

        with patch.dict(sys.modules, {"vl_convert": vl_convert}), pytest.raises(ExportError) as exc_info:
            FigureExporter().export(figure, OutputFormat.PNG)

        assert "PNG export failed" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_fallback_to_svg(self, figure: alt.Chart, vl_convert: MagicMock) -> None:
        """Test fallback when PNG export fails."""
        vl_convert.vegalite_to_png.side_effect = RuntimeError("renderer crashed")

        with patch.dict(sys.modules, {"vl_convert": vl_convert}):
            data, actual_format, fallback = FigureExporter().export_with_fallback(figure, OutputFormat.PNG)

        assert data == b"<svg></svg>"
        assert actual_format == OutputFormat.SVG
        assert fallback is True

    def test_no_fallback_needed(self, figure: alt.Chart, vl_convert: MagicMock) -> None:
        """Test that the preferred format is used when it works."""
        with patch.dict(sys.modules, {"vl_convert": vl_convert}):
            _, actual_format, fallback = FigureExporter().export_with_fallback(figure, OutputFormat.SVG)

        assert actual_format == OutputFormat.SVG
        assert fallback is False

    def test_both_formats_fail(self, figure: alt.Chart) -> None:
        """Test that ExportError is raised when no format works."""
        with patch.dict(sys.modules, {"vl_convert": None}), pytest.raises(ExportError) as exc_info:
            FigureExporter().export_with_fallback(figure, OutputFormat.PNG)

        assert "both formats" in exc_info.value.message
