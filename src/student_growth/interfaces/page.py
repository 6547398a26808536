"""Document model of the host page.

The controller and the views never touch markup directly. They address page
regions through the selectors from :class:`~student_growth.core.config.Settings`
and the page renders itself to HTML with Jinja2 once everything is in place.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from http.cookies import SimpleCookie
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from student_growth.infra.logging import get_logger

if TYPE_CHECKING:
    from student_growth.core.config import Settings
    from student_growth.views.base import BaseView

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

ChangeListener = Callable[[], Awaitable[Any]]
ClickHandler = Callable[[], Any]


@dataclass
class Region:
    """A page element addressed by a selector."""

    selector: str
    html: str = ""
    visible: bool = True

    @property
    def css_class(self) -> str:
        """Class name for class selectors, empty for tag selectors."""
        return self.selector[1:] if self.selector.startswith(".") else ""


@dataclass
class SelectControl:
    """A select box built from one manifest attribute."""

    name: str
    options: list[str]
    value: str | None = None
    _listeners: list[ChangeListener] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.value not in self.options:
            self.value = self.options[0] if self.options else None

    @property
    def css_class(self) -> str:
        """Class the host page styles the control with."""
        return f"controls__{self.name}"

    def on_change(self, listener: ChangeListener) -> None:
        """Register a coroutine function called after every change."""
        self._listeners.append(listener)

    async def change(self, value: str) -> None:
        """Select a value and notify listeners.

        Raises:
            ValueError: If the value is not one of the options
        """
        if value not in self.options:
            msg = f"'{value}' is not an option of '{self.name}'"
            raise ValueError(msg)
        self.value = value
        for listener in self._listeners:
            await listener()


class Page:
    """In-memory host page."""

    def __init__(
        self,
        settings: Settings,
        title: str | None = None,
        cookies: str = "",
        preselected: dict[str, str] | None = None,
    ) -> None:
        """Initialize page.

        Args:
            settings: Application settings providing the selector contract
            title: Document title; defaults to ``settings.page_title``
            cookies: Cookie header sent with the page request
            preselected: Requested selections, applied when controls are built
        """
        self.settings = settings
        self.original_title = title or settings.page_title
        self.title = self.original_title
        self.body_classes: set[str] = set()
        self.cookies: SimpleCookie = SimpleCookie()
        if cookies:
            self.cookies.load(cookies)

        self._regions: dict[str, Region] = {
            selector: Region(selector)
            for selector in (
                settings.page_wrapper_selector,
                settings.fullscreen_selector,
                settings.data_info_selector,
                settings.controls_selector,
                settings.main_selector,
                settings.chart_selector,
                settings.map_selector,
                settings.device_notice_selector,
                settings.device_notice_confirm_selector,
            )
        }
        self._controls: dict[str, SelectControl] = {}
        self._preselected: dict[str, str] = dict(preselected or {})
        self._click_handlers: dict[str, ClickHandler] = {}
        self._mounted: dict[str, BaseView] = {}
        self._env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html", "j2"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # Regions

    def region(self, selector: str) -> Region:
        """Get a region.

        Raises:
            KeyError: If the selector is not part of the page
        """
        return self._regions[selector]

    def set_html(self, selector: str, html: str) -> None:
        """Replace the content of a region."""
        self.region(selector).html = html

    def html(self, selector: str) -> str:
        """Content of a region."""
        return self.region(selector).html

    def show(self, selector: str) -> None:
        """Make a region visible."""
        self.region(selector).visible = True

    def hide(self, selector: str) -> None:
        """Hide a region."""
        self.region(selector).visible = False

    def is_visible(self, selector: str) -> bool:
        """Whether a region is visible."""
        return self.region(selector).visible

    # Body classes and cookies

    def add_body_class(self, name: str) -> None:
        """Add a class to the body element."""
        self.body_classes.add(name)

    def has_body_class(self, name: str) -> bool:
        """Whether the body element carries a class."""
        return name in self.body_classes

    def get_cookie(self, name: str) -> str | None:
        """Value of a cookie or None if it is not set."""
        morsel = self.cookies.get(name)
        return morsel.value if morsel is not None else None

    def set_cookie(self, name: str, value: str) -> None:
        """Set a session cookie."""
        self.cookies[name] = value
        self.cookies[name]["path"] = "/"

    # Controls

    @property
    def controls(self) -> list[SelectControl]:
        """Controls in display order."""
        return list(self._controls.values())

    def set_controls(self, controls: list[SelectControl]) -> None:
        """Replace the content of the controls panel.

        Preselected values are applied to matching controls.
        """
        self._controls = {}
        for control in controls:
            requested = self._preselected.get(control.name)
            if requested is not None and requested in control.options:
                control.value = requested
            self._controls[control.name] = control

    def control(self, name: str) -> SelectControl | None:
        """Get a control by attribute name."""
        return self._controls.get(name)

    def preselect(self, name: str, value: str) -> None:
        """Record a requested selection for an attribute."""
        self._preselected[name] = value

    def selected(self, name: str) -> str | None:
        """Live value for an attribute.

        The control's value wins; without a control the requested selection
        is returned.
        """
        control = self._controls.get(name)
        if control is not None:
            return control.value
        return self._preselected.get(name)

    async def select(self, name: str, value: str) -> None:
        """Change a control as a user would.

        Raises:
            KeyError: If there is no control for the attribute
        """
        await self._controls[name].change(value)

    # Click handlers

    def on_click(self, selector: str, handler: ClickHandler) -> None:
        """Set the click handler of an element, replacing any previous one."""
        self._click_handlers[selector] = handler

    def click(self, selector: str) -> None:
        """Trigger the click handler of an element."""
        handler = self._click_handlers.get(selector)
        if handler is None:
            logger.debug("Click without handler", selector=selector)
            return
        handler()

    # Views

    def mount(self, selector: str, view: BaseView) -> None:
        """Attach a view to a region."""
        self.region(selector)
        self._mounted[selector] = view

    def mounted(self, selector: str) -> BaseView | None:
        """View attached to a region."""
        return self._mounted.get(selector)

    # Rendering

    def render_fragment(self, template_name: str, **context: Any) -> str:
        """Render a markup fragment for a region."""
        return self._env.get_template(template_name).render(**context).strip()

    def to_html(self) -> str:
        """Render the complete document."""
        figures = {
            selector: {
                "css_class": self.region(selector).css_class,
                "styles": view.styles,
                "spec": view.to_dict(),
            }
            for selector, view in self._mounted.items()
        }
        return self._env.get_template("page.html.j2").render(
            title=self.title,
            body_classes=sorted(self.body_classes),
            regions={selector: region for selector, region in self._regions.items()},
            controls=self.controls,
            figures=figures,
            settings=self.settings,
        )
