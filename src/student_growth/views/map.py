"""Choropleth map of all regions for the active semester."""

from __future__ import annotations

import asyncio
import copy
from typing import TYPE_CHECKING, Any, Self

import altair as alt
import polars as pl

from student_growth.core.enums import ViewName
from student_growth.core.errors import DataUnavailableError
from student_growth.infra.logging import get_logger
from student_growth.views.base import BaseView

if TYPE_CHECKING:
    from student_growth.core.config import Settings
    from student_growth.infra.data_source import DataSource
    from student_growth.interfaces.page import Page
    from student_growth.views.chart import Chart
    from student_growth.views.themes import FigureT

logger = get_logger(__name__)


class VisualizationMap(BaseView):
    """Choropleth view.

    Regions are shaded by the ``key_x`` value of the row whose semester equals
    ``key_y``. One region is selected at a time; it is outlined on the map and
    shown in the linked chart.
    """

    view_name = ViewName.MAP

    def __init__(self, settings: Settings, data_source: DataSource, page: Page | None = None) -> None:
        """Initialize map view."""
        super().__init__(settings, data_source, page)
        self._geo: str = settings.geo_file
        self._geo_data: dict[str, Any] | None = None
        self._chart: Chart | None = None
        self._region: str = settings.default_region
        self._projection: dict[str, Any] | None = None

    @property
    def selector(self) -> str:
        """Page region the map renders into."""
        return self.settings.map_selector

    def _define_surface(self) -> None:
        self._projection = {"type": "mercator"}
        logger.debug("Map surface created", width=self.settings.map_width, height=self.settings.map_height)

    def get_geo(self) -> str:
        """Location of the GeoJSON boundaries."""
        return self._geo

    def set_geo(self, reference: str) -> Self:
        """Set the GeoJSON boundaries."""
        if reference != self._geo:
            self._geo_data = None
        self._geo = reference
        return self

    def get_chart(self) -> Chart | None:
        """Chart that follows the selected region."""
        return self._chart

    def set_chart(self, chart: Chart) -> Self:
        """Link a chart that follows the selected region."""
        self._chart = chart
        return self

    def get_region(self) -> str:
        """Currently selected region."""
        return self._region

    def set_region(self, region: str) -> Self:
        """Select a region without redrawing."""
        self._region = region
        return self

    async def select_region(self, region: str) -> bool:
        """Select a region and redraw map and linked chart."""
        self.set_region(region)
        return await self.render()

    async def _load_geo(self) -> dict[str, Any]:
        if self._geo_data is None:
            self._geo_data = await self.data_source.fetch_geojson(self._geo)
        return self._geo_data

    def region_values(self, frame: pl.DataFrame) -> dict[str, float]:
        """Values of the active column per region for the active semester.

        Args:
            frame: Parsed CSV frame

        Returns:
            Mapping of region name to value; regions without a numeric value are left out
        """
        region_column = self.settings.region_column
        period_column = self.settings.period_column
        if self._key_x is None or self._key_x not in frame.columns or region_column not in frame.columns:
            return {}

        subset = frame.filter(pl.col(period_column) == self._key_y)
        regions = subset[region_column].to_list()
        values = self.numeric_values(subset, self._key_x).to_list()
        return {
            region: value
            for region, value in zip(regions, values, strict=True)
            if region is not None and value is not None
        }

    async def render(self) -> bool:  # type: ignore[override]
        """Load CSV and boundaries, redraw the map, then redraw the linked chart.

        Missing boundaries only skip the map figure; the linked chart is still
        drawn from the CSV.

        Returns:
            True if the map figure was replaced, False if it was not
        """
        token = self._begin_request()
        self.init()

        try:
            frame, geo = await asyncio.gather(self._load_frame(), self._load_geo_or_none())
        except DataUnavailableError as e:
            logger.warning("Map data unavailable", key_x=self._key_x, key_y=self._key_y, error=e.message)
            return False

        if not self._is_current(token):
            logger.debug("Discarding stale map render", key_x=self._key_x, key_y=self._key_y, token=token)
            return False

        rendered = False
        if geo is not None:
            values = self.region_values(frame)
            self._figure = self._build_figure(geo, values)
            self.set_style("visibility", "visible")
            rendered = True
            logger.debug("Map rendered", key_x=self._key_x, key_y=self._key_y, regions=len(values))

        if self._chart is not None:
            await self._chart.render(self._region)

        return rendered

    async def _load_geo_or_none(self) -> dict[str, Any] | None:
        try:
            return await self._load_geo()
        except DataUnavailableError as e:
            logger.warning("Map boundaries unavailable", geo=e.source, error=e.message)
            return None

    def _features(self, geo: dict[str, Any], values: dict[str, float]) -> list[dict[str, Any]]:
        name_property = self.settings.geo_name_property
        features = []
        for feature in geo["features"]:
            item = copy.deepcopy(feature)
            properties = item.setdefault("properties", {}) or {}
            name = properties.get(name_property)
            properties["value"] = values.get(name)
            properties["active"] = name == self._region
            item["properties"] = properties
            features.append(item)
        return features

    def _build_figure(self, geo: dict[str, Any], values: dict[str, float]) -> FigureT:
        colors = self.color_strategy.get_view_colors(ViewName.MAP)
        name_field = f"properties.{self.settings.geo_name_property}"
        data = alt.Data(values=self._features(geo, values))
        projection = self._projection or {"type": "mercator"}

        outline = (
            alt.Chart(data)
            .mark_geoshape(fill=colors["missing"], stroke=colors["stroke"], strokeWidth=colors["stroke_width"])
            .project(**projection)
        )
        shaded = (
            alt.Chart(data)
            .mark_geoshape()
            .encode(
                color=alt.Color(
                    "properties.value:Q",
                    title=self._key_x or "",
                    scale=alt.Scale(range=colors["range"]),
                    legend=alt.Legend(format=","),
                ),
                stroke=alt.condition(
                    "datum.properties.active", alt.value(colors["active_stroke"]), alt.value(colors["stroke"])
                ),
                strokeWidth=alt.condition(
                    "datum.properties.active",
                    alt.value(colors["active_stroke_width"]),
                    alt.value(colors["stroke_width"]),
                ),
                tooltip=[
                    alt.Tooltip(f"{name_field}:N", title="Region"),
                    alt.Tooltip("properties.value:Q", title=self._key_x or "", format=","),
                ],
            )
            .transform_filter("isValid(datum.properties.value)")
            .project(**projection)
        )

        figure = alt.layer(outline, shaded).properties(
            width=self.settings.map_width,
            height=self.settings.map_height,
            title=alt.TitleParams(text=self._key_y or "", subtitle=(self._key_x or "").replace(" ", " | ", 1)),
        )
        return self.theme.apply_to_chart(figure)
