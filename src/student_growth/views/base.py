"""Base class shared by the chart and map views."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Self

import polars as pl

from student_growth.core.enums import ViewName
from student_growth.core.errors import DataUnavailableError
from student_growth.infra.logging import get_logger
from student_growth.views.colors import color_strategy
from student_growth.views.themes import FigureT, default_theme

if TYPE_CHECKING:
    from student_growth.core.config import Settings
    from student_growth.infra.data_source import DataSource
    from student_growth.interfaces.page import Page

logger = get_logger(__name__)


class BaseView(ABC):
    """Owns a rendering surface and the selection bound to it.

    State is only changed through the setters, which return the view so
    configuration calls can be chained. Each render takes a sequence token;
    when a newer render was started while data was loading, the older one
    drops its result.
    """

    view_name: ClassVar[ViewName]

    def __init__(self, settings: Settings, data_source: DataSource, page: Page | None = None) -> None:
        """Initialize view.

        Args:
            settings: Application settings
            data_source: Source for the CSV payload
            page: Host page the view mounts itself into
        """
        self.settings = settings
        self.data_source = data_source
        self.page = page
        self.theme = default_theme
        self.color_strategy = color_strategy

        self._data: str | None = None
        self._key_x: str | None = None
        self._key_y: str | None = None
        self._styles: dict[str, str] = {"visibility": "hidden"}
        self._figure: FigureT | None = None
        self._request_seq = 0
        self._initialized = False
        self._mounted = False

    @property
    @abstractmethod
    def selector(self) -> str:
        """Page region the view renders into."""

    def init(self) -> Self:
        """Create the drawing surface once and mount it into the page.

        Safe to call repeatedly.
        """
        if not self._initialized:
            self._define_surface()
            self._initialized = True

        if self.page is not None and not self._mounted:
            self.page.mount(self.selector, self)
            self._mounted = True

        return self

    @abstractmethod
    def _define_surface(self) -> None:
        """Set up size, margins and static mark settings."""

    @property
    def initialized(self) -> bool:
        """Whether the drawing surface exists."""
        return self._initialized

    def get_data(self) -> str | None:
        """Location of the bound CSV source."""
        return self._data

    def set_data(self, reference: str) -> Self:
        """Bind a CSV source."""
        self._data = reference
        return self

    def get_key_x(self) -> str | None:
        """Active composite value column."""
        return self._key_x

    def set_key_x(self, key: str) -> Self:
        """Set the active composite value column."""
        self._key_x = key
        return self

    def get_key_y(self) -> str | None:
        """Active semester."""
        return self._key_y

    def set_key_y(self, key: str | None) -> Self:
        """Set the active semester."""
        self._key_y = key
        return self

    def get_style(self, name: str) -> str | None:
        """Read a style property of the surface."""
        return self._styles.get(name)

    def set_style(self, name: str, value: str) -> Self:
        """Set a style property of the surface."""
        self._styles[name] = value
        return self

    @property
    def styles(self) -> dict[str, str]:
        """Copy of all style properties."""
        return dict(self._styles)

    @property
    def figure(self) -> FigureT | None:
        """Most recently rendered figure."""
        return self._figure

    def to_dict(self) -> dict[str, Any] | None:
        """Vega-Lite specification of the current figure."""
        if self._figure is None:
            return None
        return self._figure.to_dict()  # type: ignore[no-any-return]

    async def bind_data(self, reference: str) -> Self:
        """Bind a CSV source and fetch it.

        An unavailable file is logged; the view then stays unrendered.
        """
        self.set_data(reference)
        try:
            await self.data_source.fetch_csv(reference)
        except DataUnavailableError as e:
            logger.warning("Data file could not be bound", view=self.view_name.value, error=e.message)
        return self

    @abstractmethod
    async def render(self, *args: Any) -> bool:
        """Redraw the surface for the current selection.

        Returns:
            True if the figure was replaced, False if the render was dropped
        """

    def _begin_request(self) -> int:
        self._request_seq += 1
        return self._request_seq

    def _is_current(self, token: int) -> bool:
        return token == self._request_seq

    async def _load_frame(self) -> pl.DataFrame:
        """Fetch the bound CSV.

        Raises:
            DataUnavailableError: If no source is bound or it cannot be loaded
        """
        if self._data is None:
            msg = "No data file bound"
            raise DataUnavailableError(msg)
        return await self.data_source.fetch_csv(self._data)

    def numeric_values(self, frame: pl.DataFrame, column: str) -> pl.Series:
        """Coerce a value column to floats; unparsable cells and NaN become null.

        Args:
            frame: Parsed CSV frame
            column: Value column

        Returns:
            Float series aligned with ``frame``
        """
        series = frame[column]
        if series.dtype == pl.String:
            series = series.str.strip_chars()
        return series.cast(pl.Float64, strict=False).fill_nan(None)
