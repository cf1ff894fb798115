# tests/conftest.py
"""
Shared fixtures: an in-memory stand-in for the Appium driver and its
WebElements, injected through Session(driver_factory=...).
"""

import pytest
from selenium.common.exceptions import NoSuchElementException

from uiauto_appium.config import TimeConfig
from uiauto_appium.context import ActionContextManager
from uiauto_appium.repository import Repository, SessionConfig
from uiauto_appium.session import Session
from uiauto_appium.timings import PAUSE_FIELDS, TIMEOUT_FIELDS


def pytest_configure(config):
    config.addinivalue_line("markers", "e2e: needs a live Appium server and device")


class FakeWebElement:
    """Minimal WebElement: text, attributes, state flags and child lookups."""

    def __init__(self, name="", text="", displayed=True, enabled=True, attrs=None,
                 children=None, click_error=None, text_error=None):
        self.name = name
        self._text = text
        self.displayed = displayed
        self.enabled = enabled
        self.attrs = dict(attrs or {})
        self.children = dict(children or {})
        self.click_error = click_error
        self.text_error = text_error
        self.events = []
        self.typed = []

    @property
    def text(self):
        if self.text_error is not None:
            raise self.text_error
        return self._text

    def is_displayed(self):
        if isinstance(self.displayed, Exception):
            raise self.displayed
        return self.displayed

    def is_enabled(self):
        return self.enabled

    def get_attribute(self, name):
        return self.attrs.get(name)

    def click(self):
        if self.click_error is not None:
            raise self.click_error
        self.events.append(("click", self.name))

    def send_keys(self, text):
        self.typed.append(text)
        self.events.append(("type", self.name))

    def find_element(self, by, query):
        found = self.children.get(query) or []
        if not found:
            raise NoSuchElementException(f"No child for {query}")
        return found[0]

    def find_elements(self, by, query):
        return list(self.children.get(query) or [])


class FakeDriver:
    """
    Driver keyed by locator query.

    `delays` maps a query to the number of lookups that fail before the
    element shows up.
    """

    def __init__(self, elements=None, delays=None):
        self.elements = {}
        self.delays = dict(delays or {})
        self.lookups = []
        self.events = []
        self.keycodes = []
        self.screenshots = []
        self.implicit_wait = None
        self.quit_called = False
        self.page_source = "<hierarchy/>"
        for query, found in (elements or {}).items():
            self.add(query, *found)

    def add(self, query, *elements):
        for el in elements:
            el.events = self.events
        self.elements.setdefault(query, []).extend(elements)

    def remove(self, query):
        self.elements.pop(query, None)

    def find_element(self, by, query):
        self.lookups.append(query)
        if self.delays.get(query, 0) > 0:
            self.delays[query] -= 1
            raise NoSuchElementException(f"Not yet rendered: {query}")
        found = self.elements.get(query) or []
        if not found:
            raise NoSuchElementException(f"No element for {query}")
        return found[0]

    def find_elements(self, by, query):
        self.lookups.append(query)
        return list(self.elements.get(query) or [])

    def press_keycode(self, keycode):
        self.keycodes.append(keycode)
        self.events.append(("key", keycode))

    def get_screenshot_as_file(self, path):
        with open(path, "wb") as f:
            f.write(b"\x89PNG")
        self.screenshots.append(path)
        return True

    def implicitly_wait(self, seconds):
        self.implicit_wait = seconds

    def quit(self):
        self.quit_called = True


def make_card(title="", price_desc=None, name="card", title_error=None):
    """Result card with an optional title node and price node."""
    repo = Repository.default()
    children = {}
    if title is not None:
        children[repo.get_locator("card_title").query] = [
            FakeWebElement(name=f"{name}_title", text=title, text_error=title_error)
        ]
    if price_desc is not None:
        children[repo.get_locator("card_price").query] = [
            FakeWebElement(name=f"{name}_price", attrs={"content-desc": price_desc})
        ]
    return FakeWebElement(name=name, children=children)


def make_session(driver, config=None):
    """Session whose driver factory hands out the given fake driver."""
    return Session(config or SessionConfig(), driver_factory=lambda url, caps: driver)


@pytest.fixture(autouse=True)
def _clear_action_context():
    ActionContextManager.clear()
    yield
    ActionContextManager.clear()


@pytest.fixture
def repo():
    return Repository.default()


@pytest.fixture
def fast_config():
    """Short locator timeouts and no settle delays."""
    overrides = {name: 0.3 for name in TIMEOUT_FIELDS}
    overrides.update({name: 0 for name in PAUSE_FIELDS})
    return TimeConfig.build_from(overrides=overrides)


@pytest.fixture
def scenario_driver(repo):
    """Driver where every scenario element is on screen, with three result cards."""
    driver = FakeDriver()
    for name in repo.list_elements():
        if name in ("result_card", "card_title", "card_price"):
            continue
        driver.add(repo.get_locator(name).query, FakeWebElement(name=name))
    driver.add(
        repo.get_locator("result_card").query,
        make_card("Consola PlayStation 5 Slim", "4500000 Pesos", name="card1"),
        make_card("PlayStation 5 Pro", "3900000 Pesos", name="card2"),
        make_card("PS5 Digital", "2800000 Pesos", name="card3"),
    )
    return driver
