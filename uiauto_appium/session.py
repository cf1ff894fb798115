# uiauto_appium/session.py
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional

from appium import webdriver
from appium.options.android import UiAutomator2Options

from .exceptions import SessionError
from .locator import Locator
from .repository import SessionConfig

DriverFactory = Callable[[str, Dict[str, Any]], Any]


def create_appium_driver(server_url: str, capabilities: Dict[str, Any]) -> Any:
    """Open a remote Appium session with UiAutomator2 options."""
    options = UiAutomator2Options().load_capabilities(capabilities)
    return webdriver.Remote(server_url, options=options)


class Session:
    """
    Owns the Appium driver for one scenario run.

    The driver is created on start() and released on quit(); every backend
    call goes through this object so the runner and its tests never touch a
    global driver.
    """

    def __init__(
        self,
        config: SessionConfig,
        driver_factory: Optional[DriverFactory] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self._driver_factory = driver_factory or create_appium_driver
        self.log = logger or logging.getLogger("uiauto_appium")
        self._driver: Optional[Any] = None

    @property
    def is_active(self) -> bool:
        return self._driver is not None

    @property
    def driver(self) -> Any:
        if self._driver is None:
            raise SessionError("Session not started. Call start() first.")
        return self._driver

    def start(self) -> Any:
        if self._driver is not None:
            return self._driver

        self.log.info("Starting Appium session: %s", self.config.server_url)
        try:
            driver = self._driver_factory(self.config.server_url, dict(self.config.capabilities))
        except Exception as e:
            raise SessionError(f"Could not start Appium session at {self.config.server_url}: {e}") from e

        self._driver = driver
        if self.config.implicit_wait:
            driver.implicitly_wait(self.config.implicit_wait)
        self.log.info("Appium session started")
        return driver

    def quit(self) -> None:
        driver = self._driver
        if driver is None:
            return
        self._driver = None
        try:
            driver.quit()
            self.log.info("Appium session closed")
        except Exception as e:
            # best effort
            self.log.warning("Failed to quit Appium session: %s", e)

    def __enter__(self) -> Session:
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.quit()

    def find_element(self, locator: Locator) -> Any:
        """Raw backend lookup; raises the backend's NoSuchElementException when absent."""
        return self.driver.find_element(locator.appium_by, locator.query)

    def find_elements(self, locator: Locator) -> List[Any]:
        return list(self.driver.find_elements(locator.appium_by, locator.query))

    def press_key(self, keycode: int) -> None:
        self.driver.press_keycode(keycode)

    def screenshot(self, path: str) -> bool:
        return bool(self.driver.get_screenshot_as_file(path))

    def page_source(self) -> str:
        return self.driver.page_source or ""
