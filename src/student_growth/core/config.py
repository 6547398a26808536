"""Application settings.

All selector hooks, file locations and figure dimensions live here and are
passed explicitly into every component. Values can be overridden through
environment variables prefixed with ``STUDENT_GROWTH_`` or a ``.env`` file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Immutable configuration for the visualization."""

    model_config = SettingsConfigDict(
        env_prefix="STUDENT_GROWTH_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    # Data locations
    info_file: str = Field("data/info.json", description="Manifest path or URL")
    geo_file: str = Field("data/germany.geo.json", description="GeoJSON boundaries path or URL")
    geo_name_property: str = Field("name", description="Feature property holding the region name")
    http_timeout: float = Field(10.0, description="Timeout for remote fetches in seconds")

    # CSV layout
    period_column: str = Field("semester", description="Name given to the first CSV column (semester label)")
    region_column: str = Field("state", description="Category discriminator column (state name)")
    default_region: str = Field("Deutschland", description="Region the chart shows before any selection")

    # Selector contract of the host page
    page_wrapper_selector: str = ".page-wrapper"
    fullscreen_selector: str = ".fullscreen"
    data_info_selector: str = ".data-info"
    controls_selector: str = ".controls"
    main_selector: str = "main"
    chart_selector: str = ".chart"
    map_selector: str = ".map"
    device_notice_selector: str = ".device-notice"
    device_notice_confirm_selector: str = ".device-notice__confirm"
    device_notice_cookie: str = "device_notice_confirmed"
    device_notice_confirmed_class: str = "device-notice--confirmed"

    # Page
    page_title: str = Field("Student Growth", description="Document title before the manifest loads")

    # Chart geometry
    chart_width: int = Field(700, ge=100)
    chart_height: int = Field(500, ge=100)
    chart_margin_top: int = 50
    chart_margin_right: int = 30
    chart_margin_bottom: int = 120
    chart_margin_left: int = 80
    chart_y_ticks: int = 6
    chart_dot_size: float = Field(64.0, description="Dot area in square pixels (radius 4.5)")

    # Map geometry
    map_width: int = Field(500, ge=100)
    map_height: int = Field(650, ge=100)
