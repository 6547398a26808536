"""Line chart of one region's values over all semesters."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import altair as alt
import polars as pl

from student_growth.core.enums import ViewName
from student_growth.core.errors import DataUnavailableError
from student_growth.core.models import ChartPoint
from student_growth.infra.logging import get_logger
from student_growth.views.base import BaseView

if TYPE_CHECKING:
    from student_growth.core.config import Settings
    from student_growth.infra.data_source import DataSource
    from student_growth.interfaces.page import Page
    from student_growth.views.themes import FigureT

logger = get_logger(__name__)


class Chart(BaseView):
    """Line chart view.

    The x axis is a point scale over the semester labels of the selected
    region, the y axis a linear scale over the observed range of the active
    value column. The semester matching ``key_y`` is drawn as the active dot
    and the active axis label.
    """

    view_name = ViewName.CHART

    def __init__(self, settings: Settings, data_source: DataSource, page: Page | None = None) -> None:
        """Initialize chart view."""
        super().__init__(settings, data_source, page)
        self._width = 0
        self._height = 0
        self._padding: dict[str, int] = {}
        self._line_settings: dict[str, Any] | None = None
        self._title: str | None = None
        self._subtitle: str | None = None

    @property
    def selector(self) -> str:
        """Page region the chart renders into."""
        return self.settings.chart_selector

    def _define_surface(self) -> None:
        s = self.settings
        self._padding = {
            "top": s.chart_margin_top,
            "right": s.chart_margin_right,
            "bottom": s.chart_margin_bottom,
            "left": s.chart_margin_left,
        }
        self._width = s.chart_width - s.chart_margin_left - s.chart_margin_right
        self._height = s.chart_height - s.chart_margin_top - s.chart_margin_bottom

        colors = self.color_strategy.get_view_colors(ViewName.CHART)
        self._line_settings = {
            "color": colors["line"],
            "strokeWidth": colors["stroke_width"],
            "interpolate": "linear",
        }
        logger.debug("Chart surface created", width=self._width, height=self._height)

    @property
    def title(self) -> str | None:
        """Title of the current figure (the selected region)."""
        return self._title

    @property
    def subtitle(self) -> str | None:
        """Subtitle of the current figure (the active keys)."""
        return self._subtitle

    def points(self, frame: pl.DataFrame, category_label: str) -> list[ChartPoint]:
        """Collect the plotted points for one region.

        Rows keep their CSV order. Rows whose value is missing or not numeric
        are skipped.

        Args:
            frame: Parsed CSV frame
            category_label: Region whose rows are plotted

        Returns:
            Ordered chart points
        """
        region_column = self.settings.region_column
        period_column = self.settings.period_column
        if self._key_x is None or self._key_x not in frame.columns or region_column not in frame.columns:
            return []

        subset = frame.filter(pl.col(region_column) == category_label)
        periods = subset[period_column].to_list()
        values = self.numeric_values(subset, self._key_x).to_list()

        return [
            ChartPoint(x=period, y=value, active=period == self._key_y)
            for period, value in zip(periods, values, strict=True)
            if value is not None and period is not None
        ]

    def value_domain(self, frame: pl.DataFrame) -> tuple[float, float] | None:
        """Observed min/max of the active value column across all regions.

        Returns:
            Domain bounds or None if the column has no numeric values
        """
        if self._key_x is None or self._key_x not in frame.columns:
            return None

        values = self.numeric_values(frame, self._key_x).drop_nulls()
        if values.is_empty():
            return None
        return float(values.min()), float(values.max())  # type: ignore[arg-type]

    async def render(self, category_label: str) -> bool:  # type: ignore[override]
        """Load the bound CSV and redraw the chart for one region.

        Args:
            category_label: Region to plot

        Returns:
            True if the figure was replaced, False if the render was dropped
        """
        token = self._begin_request()
        self.init()

        try:
            frame = await self._load_frame()
        except DataUnavailableError as e:
            logger.warning("Chart data unavailable", category=category_label, error=e.message)
            return False

        if not self._is_current(token):
            logger.debug("Discarding stale chart render", category=category_label, token=token)
            return False

        points = self.points(frame, category_label)
        domain = self.value_domain(frame)

        self._title = category_label
        self._subtitle = (self._key_x or "").replace(" ", " | ", 1)
        self._figure = self._build_figure(points, domain)
        self.set_style("visibility", "visible")

        logger.debug(
            "Chart rendered",
            category=category_label,
            key_x=self._key_x,
            key_y=self._key_y,
            points=len(points),
        )
        return True

    def _build_figure(self, points: list[ChartPoint], domain: tuple[float, float] | None) -> FigureT:
        colors = self.color_strategy.get_view_colors(ViewName.CHART)
        style = self.color_strategy.style
        text = self.color_strategy.text
        active_test = f"datum.value === {json.dumps(self._key_y)}"

        data = alt.Data(values=[point.model_dump() for point in points])
        base = alt.Chart(data)

        x = alt.X(
            "x:N",
            sort=[point.x for point in points],
            scale=alt.Scale(type="point"),
            axis=alt.Axis(
                title=None,
                labelAngle=style.LABEL_ANGLE,
                labelAlign="right",
                labelBaseline="middle",
                labelColor=alt.condition(active_test, alt.value(text.ACTIVE_LABEL), alt.value(text.AXIS_LABEL)),
                labelFontWeight=alt.condition(active_test, alt.value("bold"), alt.value("normal")),
            ),
        )

        y_scale = alt.Scale(zero=False, nice=False, domain=list(domain)) if domain else alt.Scale(zero=False)
        y = alt.Y(
            "y:Q",
            scale=y_scale,
            axis=alt.Axis(
                title=None,
                tickCount=self.settings.chart_y_ticks,
                format=",",
                grid=True,
                gridColor=colors["grid"],
                gridDash=colors["grid_dash"],
            ),
        )

        line = base.mark_line(**(self._line_settings or {})).encode(x=x, y=y)
        dots = base.mark_point(
            filled=True,
            size=self.settings.chart_dot_size,
            stroke=colors["dot"],
            strokeWidth=1.5,
        ).encode(
            x=x,
            y=y,
            color=alt.condition("datum.active", alt.value(colors["active"]), alt.value(colors["dot_fill"])),
            tooltip=[alt.Tooltip("x:N", title="Semester"), alt.Tooltip("y:Q", title=self._key_x or "", format=",")],
        )

        figure = alt.layer(line, dots).properties(
            width=self._width,
            height=self._height,
            padding=self._padding,
            title=alt.TitleParams(text=self._title or "", subtitle=self._subtitle or ""),
        )
        return self.theme.apply_to_chart(figure)
