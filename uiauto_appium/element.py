# uiauto_appium/element.py
"""
@file element.py
@brief Thin wrapper over an Appium WebElement handle.
"""

from __future__ import annotations
from typing import Any, List, Optional

from .locator import Locator


class Element:
    """
    Element handle returned by the locator.

    The wrapped handle is only valid until the UI changes. Do not keep an
    Element across steps; resolve the locator again instead.
    """

    def __init__(self, handle: Any, locator: Optional[Locator] = None):
        """
        @param handle Raw Appium WebElement
        @param locator Locator the handle was resolved from
        """
        self._handle = handle
        self._locator = locator

    @property
    def handle(self) -> Any:
        return self._handle

    @property
    def locator(self) -> Optional[Locator]:
        return self._locator

    # --- State Queries ---

    def is_visible(self) -> bool:
        try:
            return bool(self._handle.is_displayed())
        except Exception:
            return False

    def is_enabled(self) -> bool:
        try:
            return bool(self._handle.is_enabled())
        except Exception:
            return False

    def is_interactable(self) -> bool:
        """Visible and enabled."""
        return self.is_visible() and self.is_enabled()

    # --- Content ---

    def get_text(self) -> str:
        return self._handle.text or ""

    def get_attribute(self, name: str) -> Optional[str]:
        value = self._handle.get_attribute(name)
        return None if value is None else str(value)

    def find(self, locator: Locator) -> Element:
        """First descendant matching locator; raises the backend error when absent."""
        return Element(self._handle.find_element(locator.appium_by, locator.query), locator)

    def find_all(self, locator: Locator) -> List[Element]:
        return [Element(h, locator) for h in self._handle.find_elements(locator.appium_by, locator.query)]

    # --- Actions ---

    def click(self) -> Element:
        self._handle.click()
        return self

    def type_text(self, text: str) -> Element:
        self._handle.send_keys(text)
        return self

    def __repr__(self) -> str:
        return f"Element({self._locator})"
