"""Theme applied to every rendered figure."""

from typing import ClassVar

import altair as alt

from student_growth.views.colors import StructuralColors, TextColors

FigureT = alt.Chart | alt.LayerChart


class Theme:
    """Consistent styling for chart and map figures."""

    FONT_STACK: ClassVar[list[str]] = [
        "Source Sans Pro",
        "Noto Sans",
        "DejaVu Sans",
        "sans-serif",
    ]

    def __init__(self) -> None:
        """Initialize theme with default color definitions."""
        self.structural = StructuralColors()
        self.text = TextColors()

    @property
    def font(self) -> str:
        """Comma-separated font family string for Vega-Lite."""
        return ", ".join(self.FONT_STACK)

    def apply_to_chart(self, chart: FigureT) -> FigureT:
        """Apply theme settings to an Altair chart.

        Args:
            chart: Altair chart object

        Returns:
            Chart with theme applied
        """
        configured: FigureT = (
            chart.configure(background=self.structural.BACKGROUND, font=self.font)
            .configure_axis(
                domainColor=self.structural.AXIS_LINE,
                domainWidth=1,
                labelColor=self.text.AXIS_LABEL,
                labelFontSize=12,
                tickColor=self.structural.TICK_LINE,
                tickSize=5,
                titleColor=self.text.AXIS_LABEL,
                titleFontSize=13,
                titleFontWeight="normal",
            )
            .configure_legend(
                labelColor=self.text.LEGEND,
                titleColor=self.text.LEGEND,
                orient="bottom",
            )
            .configure_title(
                color=self.text.TITLE,
                subtitleColor=self.text.SUBTITLE,
                fontSize=18,
                subtitleFontSize=14,
                fontWeight=600,
                anchor="middle",
            )
            .configure_view(strokeWidth=0)
        )
        return configured


# Global default theme instance
default_theme = Theme()
