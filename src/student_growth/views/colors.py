"""Color definitions for the chart and map views."""

from typing import Any

from pydantic import BaseModel, ConfigDict

from student_growth.core.enums import ViewName


class StructuralColors(BaseModel):
    """Colors for structural elements (axes, grid, region borders)."""

    model_config = ConfigDict(frozen=True)

    BACKGROUND: str = "#FFFFFF"
    AXIS_LINE: str = "#475569"
    TICK_LINE: str = "#CBD5E1"
    GRID_MAJOR: str = "#E2E8F0"
    REGION_BORDER: str = "#FFFFFF"
    REGION_ACTIVE_BORDER: str = "#0F172A"
    REGION_MISSING: str = "#E2E8F0"


class TextColors(BaseModel):
    """Colors for text elements."""

    model_config = ConfigDict(frozen=True)

    TITLE: str = "#0F172A"
    SUBTITLE: str = "#64748B"
    AXIS_LABEL: str = "#1F2937"
    ACTIVE_LABEL: str = "#D0104C"
    LEGEND: str = "#334155"


class DataColors:
    """Colors for data marks."""

    BASE: str = "#08192D"
    ACTIVE: str = "#D0104C"
    DOT_FILL: str = "#FFFFFF"

    # Sequential scheme for the choropleth (ColorBrewer Blues 9)
    BLUES_9: tuple[str, ...] = (
        "#f7fbff",
        "#deebf7",
        "#c6dbef",
        "#9ecae1",
        "#6baed6",
        "#4292c6",
        "#2171b5",
        "#08519c",
        "#08306b",
    )


class StyleConstants:
    """Line widths and dash patterns."""

    LINE_WIDTH_DEFAULT: float = 2.0
    REGION_BORDER_WIDTH: float = 0.5
    REGION_ACTIVE_BORDER_WIDTH: float = 2.5
    GRID_DASH: tuple[int, int] = (2, 2)
    LABEL_ANGLE: int = -70


class ColorStrategy:
    """Selects mark colors per view."""

    def __init__(self) -> None:
        """Initialize color strategy with default palettes."""
        self.structural = StructuralColors()
        self.text = TextColors()
        self.data = DataColors()
        self.style = StyleConstants()

    def get_view_colors(self, view: ViewName) -> dict[str, Any]:
        """Get mark styling for a view.

        Args:
            view: View identifier

        Returns:
            Dictionary with mark styling
        """
        if view == ViewName.MAP:
            return {
                "range": list(self.data.BLUES_9),
                "missing": self.structural.REGION_MISSING,
                "stroke": self.structural.REGION_BORDER,
                "stroke_width": self.style.REGION_BORDER_WIDTH,
                "active_stroke": self.structural.REGION_ACTIVE_BORDER,
                "active_stroke_width": self.style.REGION_ACTIVE_BORDER_WIDTH,
            }
        return {
            "line": self.data.BASE,
            "stroke_width": self.style.LINE_WIDTH_DEFAULT,
            "dot_fill": self.data.DOT_FILL,
            "dot": self.data.BASE,
            "active": self.data.ACTIVE,
            "grid": self.structural.GRID_MAJOR,
            "grid_dash": list(self.style.GRID_DASH),
        }


# Global instance for easy access
color_strategy = ColorStrategy()
