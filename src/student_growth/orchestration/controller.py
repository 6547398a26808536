"""Controller wiring manifest, filter controls and views together."""

from __future__ import annotations

import asyncio
from typing import ClassVar

from student_growth.core.config import Settings
from student_growth.core.enums import ControllerState, FilterAttribute
from student_growth.core.errors import ManifestParseError, ManifestUnavailableError, StateTransitionError
from student_growth.core.models import Manifest, Selection
from student_growth.infra.data_source import DataSource
from student_growth.infra.logging import get_logger
from student_growth.interfaces.page import Page, SelectControl
from student_growth.orchestration.device_notice import DeviceNotice
from student_growth.views.chart import Chart
from student_growth.views.map import VisualizationMap

logger = get_logger(__name__)

# Markup from SpinKit
SPINNER_MARKUP = """<div class="sk-wave spinner">
  <div class="sk-rect sk-rect1"></div>
  <div class="sk-rect sk-rect2"></div>
  <div class="sk-rect sk-rect3"></div>
  <div class="sk-rect sk-rect4"></div>
  <div class="sk-rect sk-rect5"></div>
</div>"""

FALLBACK_MESSAGE = """<h1>Data is not available yet.</h1>
<div class="error">
  <p>
    <strong>Please follow these steps to get the latest data:</strong>
  </p>
  <ol>
    <li>Open a command line.</li>
    <li>
      Change to the root directory of this project:<br />
      <code>cd /path/to/student-growth</code>
    </li>
    <li>
      Download the latest data set:<br />
      <code>student-growth download &lt;manifest-url&gt; --data-dir data</code>
    </li>
    <li>Build the page again: <code>student-growth build --out dist/index.html</code></li>
  </ol>
</div>"""


class Controller:
    """Loads the manifest, builds the filter controls and keeps the views in sync.

    Lifecycle::

        LOADING -> FILTERS_READY -> INTERACTIVE
        LOADING -> ERROR_DISPLAYED

    ``ERROR_DISPLAYED`` is terminal. An interactive controller may be
    initialized again; the manifest is then reloaded and the controls rebuilt.
    """

    TRANSITIONS: ClassVar[dict[ControllerState, frozenset[ControllerState]]] = {
        ControllerState.LOADING: frozenset({ControllerState.FILTERS_READY, ControllerState.ERROR_DISPLAYED}),
        ControllerState.FILTERS_READY: frozenset({ControllerState.INTERACTIVE}),
        ControllerState.INTERACTIVE: frozenset({ControllerState.LOADING}),
        ControllerState.ERROR_DISPLAYED: frozenset(),
    }

    def __init__(
        self,
        map: VisualizationMap,  # noqa: A002
        chart: Chart,
        page: Page,
        data_source: DataSource,
        settings: Settings | None = None,
    ) -> None:
        """Store the collaborators.

        Args:
            map: Initialized map view
            chart: Initialized chart view
            page: Host page
            data_source: Source for the manifest
            settings: Application settings; defaults to the data source's settings
        """
        self.map = map
        self.chart = chart
        self.page = page
        self.data_source = data_source
        self.settings = settings or data_source.settings
        self.device_notice = DeviceNotice(self.settings)

        self.manifest: Manifest | None = None
        self.data_file = ""
        self.selection: Selection | None = None
        self._state = ControllerState.LOADING

    @classmethod
    def create(
        cls,
        settings: Settings,
        page: Page | None = None,
        data_source: DataSource | None = None,
    ) -> Controller:
        """Build page, views and controller with the default wiring.

        The map follows the chart: selecting a region on the map redraws the
        chart for it.
        """
        page = page or Page(settings)
        data_source = data_source or DataSource(settings)
        chart = Chart(settings, data_source, page).init()
        vis_map = VisualizationMap(settings, data_source, page).set_geo(settings.geo_file).set_chart(chart).init()
        return cls(vis_map, chart, page, data_source, settings)

    @property
    def state(self) -> ControllerState:
        """Current lifecycle state."""
        return self._state

    def _transition(self, target: ControllerState) -> None:
        if target not in self.TRANSITIONS[self._state]:
            raise StateTransitionError(self._state, target)
        logger.debug("Controller state change", source=self._state.value, target=target.value)
        self._state = target

    async def initialize(self) -> ControllerState:
        """Show the loading indicator, set up the device notice and load the manifest.

        Returns:
            State after loading (INTERACTIVE or ERROR_DISPLAYED)

        Raises:
            StateTransitionError: If the controller already shows the error state
        """
        if self._state != ControllerState.LOADING:
            self._transition(ControllerState.LOADING)

        self.init_spinner()
        self.init_device_notice()
        await self.load_manifest()
        return self._state

    def init_device_notice(self) -> None:
        """Apply a stored confirmation and wire the confirm button.

        Independent of the manifest, so it also runs when the data is missing.
        """
        self.device_notice.init(self.page)
        self.page.on_click(
            self.settings.device_notice_confirm_selector,
            lambda: self.device_notice.confirm(self.page),
        )

    def init_spinner(self) -> None:
        """Hide the page and show the loading indicator."""
        self.page.hide(self.settings.page_wrapper_selector)
        self.page.set_html(self.settings.fullscreen_selector, SPINNER_MARKUP)
        self.page.show(self.settings.fullscreen_selector)

    def close_fullscreen(self) -> None:
        """Hide the loading indicator."""
        self.page.hide(self.settings.fullscreen_selector)
        self.page.set_html(self.settings.fullscreen_selector, "")

    async def load_manifest(self) -> None:
        """Fetch the manifest and start the visualization, or show the fallback message."""
        try:
            try:
                manifest = await self.data_source.fetch_manifest()
            except ManifestUnavailableError as e:
                self._show_unavailable(e)
                return

            await self._start(manifest)
        finally:
            self.page.show(self.settings.page_wrapper_selector)

    def _show_unavailable(self, error: ManifestUnavailableError) -> None:
        if isinstance(error, ManifestParseError):
            logger.error("Manifest is invalid", error=error.message, code=error.code.value, source=error.source)
        else:
            logger.warning("Manifest is unavailable", error=error.message, code=error.code.value, source=error.source)

        self.page.set_html(self.settings.data_info_selector, FALLBACK_MESSAGE)
        # Hide main content to avoid displaying empty borders and padding
        self.page.hide(self.settings.main_selector)
        self.close_fullscreen()
        self._transition(ControllerState.ERROR_DISPLAYED)

    async def _start(self, manifest: Manifest) -> None:
        self.manifest = manifest
        self.data_file = self.data_source.resolve(manifest.file)

        self.page.set_html(
            self.settings.data_info_selector,
            self.page.render_fragment("data_info.html.j2", manifest=manifest),
        )
        self.build_controls(manifest)

        # Derived from the original title so reloading never stacks suffixes
        self.page.title = f"{self.page.original_title}: {manifest.title}"
        self._transition(ControllerState.FILTERS_READY)

        await asyncio.gather(
            self.map.bind_data(self.data_file),
            self.chart.bind_data(self.data_file),
            self.update(),
        )

        self.close_fullscreen()
        self._transition(ControllerState.INTERACTIVE)
        logger.info(
            "Visualization ready",
            title=manifest.title,
            controls=[control.name for control in self.page.controls],
            key_x=self.selection.key_x if self.selection else None,
            key_y=self.selection.key_y if self.selection else None,
        )

    def build_controls(self, manifest: Manifest) -> list[SelectControl]:
        """Create one select control per recognized attribute the manifest defines.

        Returns:
            Controls in display order
        """
        controls = [
            SelectControl(attribute.value, list(manifest.attributes[attribute.value]))
            for attribute in FilterAttribute
            if attribute.value in manifest.attributes
        ]
        for control in controls:
            control.on_change(self.update)

        self.page.set_controls(controls)
        return controls

    async def update(self) -> Selection:
        """Read the controls, push the keys into both views and redraw.

        The map redraws its linked chart after itself.

        Returns:
            The selection pushed into the views
        """
        nationality = self.page.selected(FilterAttribute.NATIONALITY.value) or ""
        sex = self.page.selected(FilterAttribute.SEX.value) or ""
        key_x = f"{nationality} {sex}"
        key_y = self.page.selected(FilterAttribute.SEMESTER.value)

        self.selection = Selection(key_x=key_x, key_y=key_y)
        self.map.set_key_x(key_x).set_key_y(key_y)
        self.chart.set_key_x(key_x).set_key_y(key_y)

        logger.debug("Selection updated", key_x=key_x, key_y=key_y)
        await self.map.render()
        return self.selection
