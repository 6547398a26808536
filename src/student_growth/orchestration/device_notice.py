"""One-time device compatibility notice."""

from student_growth.core.config import Settings
from student_growth.infra.logging import get_logger
from student_growth.interfaces.page import Page

logger = get_logger(__name__)


class DeviceNotice:
    """Shows the notice until the visitor confirms it once.

    Confirmation is stored in a cookie; while it is set the body carries the
    confirmed class and the host page hides the notice.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize device notice."""
        self.cookie = settings.device_notice_cookie
        self.confirmed_class = settings.device_notice_confirmed_class

    def is_confirmed(self, page: Page) -> bool:
        """Whether the confirmation cookie is set."""
        return page.get_cookie(self.cookie) is not None

    def init(self, page: Page) -> bool:
        """Add the confirmed class if the cookie is already set.

        Returns:
            Whether the notice was already confirmed
        """
        if self.is_confirmed(page):
            page.add_body_class(self.confirmed_class)
            return True
        return False

    def confirm(self, page: Page) -> None:
        """Store the confirmation and hide the notice."""
        page.set_cookie(self.cookie, "true")
        page.add_body_class(self.confirmed_class)
        logger.debug("Device notice confirmed", cookie=self.cookie)
