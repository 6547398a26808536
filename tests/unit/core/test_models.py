"""Unit tests for core data models."""

import pytest
from pydantic import ValidationError

from student_growth.core.models import ChartPoint, ErrorDetail, ErrorResponse, Manifest, Selection


class TestManifest:
    """Tests for Manifest model."""

    def test_valid_manifest(self) -> None:
        """Test manifest with all fields."""
        manifest = Manifest(
            title="Studierende",
            author="Destatis",
            url="https://example.org/source",
            file="data.csv",
            attributes={"nationality": ["Deutsche", "Ausländer"], "sex": ["männlich"]},
        )
        assert manifest.title == "Studierende"
        assert manifest.attributes["nationality"] == ["Deutsche", "Ausländer"]

    def test_attributes_default_empty(self) -> None:
        """Test that attributes default to an empty mapping."""
        manifest = Manifest(title="t", author="a", url="u", file="data.csv")
        assert manifest.attributes == {}

    def test_attribute_order_preserved(self) -> None:
        """Test that attribute values keep their order."""
        semesters = ["WS 2017/18", "WS 2015/16", "WS 2016/17"]
        manifest = Manifest(title="t", author="a", url="u", file="f.csv", attributes={"semester": semesters})
        assert manifest.attributes["semester"] == semesters

    def test_missing_title_rejected(self) -> None:
        """Test that required fields are enforced."""
        with pytest.raises(ValidationError):
            Manifest.model_validate({"author": "a", "url": "u", "file": "f.csv"})

    def test_blank_file_rejected(self) -> None:
        """Test that a blank data file reference is rejected."""
        with pytest.raises(ValidationError, match="Data file reference cannot be empty"):
            Manifest(title="t", author="a", url="u", file="   ")

    def test_attribute_values_must_be_lists(self) -> None:
        """Test that attribute values must be string lists."""
        with pytest.raises(ValidationError):
            Manifest.model_validate(
                {"title": "t", "author": "a", "url": "u", "file": "f.csv", "attributes": {"sex": "männlich"}}
            )

    def test_frozen(self) -> None:
        """Test that manifests are immutable."""
        manifest = Manifest(title="t", author="a", url="u", file="f.csv")
        with pytest.raises(ValidationError):
            manifest.title = "other"  # type: ignore[misc]


class TestSelection:
    """Tests for Selection model."""

    def test_key_y_optional(self) -> None:
        """Test that the semester may be missing."""
        selection = Selection(key_x="Deutsche weiblich")
        assert selection.key_y is None

    def test_full_selection(self) -> None:
        """Test selection with both keys."""
        selection = Selection(key_x="Ausländer männlich", key_y="WS 2016/17")
        assert selection.key_x == "Ausländer männlich"
        assert selection.key_y == "WS 2016/17"


class TestChartPoint:
    """Tests for ChartPoint model."""

    def test_defaults_to_inactive(self) -> None:
        """Test that points are inactive unless flagged."""
        point = ChartPoint(x="WS 2015/16", y=12.0)
        assert point.active is False

    def test_serializes_for_inline_data(self) -> None:
        """Test the record layout used as inline figure data."""
        point = ChartPoint(x="WS 2015/16", y=12.5, active=True)
        assert point.model_dump() == {"x": "WS 2015/16", "y": 12.5, "active": True}


class TestErrorResponse:
    """Tests for ErrorResponse model."""

    def test_minimal(self) -> None:
        """Test response with code and message only."""
        response = ErrorResponse(code="E404_MANIFEST_UNAVAILABLE", message="missing")
        assert response.details is None
        assert response.hint is None

    def test_with_details(self) -> None:
        """Test response with details."""
        response = ErrorResponse(
            code="E424_DATA_UNAVAILABLE",
            message="missing",
            details=[ErrorDetail(field="source", reason="data/data.csv")],
        )
        assert response.details is not None
        assert response.details[0].reason == "data/data.csv"
