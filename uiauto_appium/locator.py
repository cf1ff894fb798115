# uiauto_appium/locator.py
"""
@file locator.py
@brief Immutable locator: a lookup strategy plus a query string.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict

from appium.webdriver.common.appiumby import AppiumBy

from .exceptions import ConfigError


STRATEGIES: Dict[str, str] = {
    "xpath": AppiumBy.XPATH,
    "id": AppiumBy.ID,
    "accessibility_id": AppiumBy.ACCESSIBILITY_ID,
}

DEFAULT_STRATEGY = "xpath"


@dataclass(frozen=True)
class Locator:
    """
    Reference to a UI element.

    @param query Strategy-specific query (an XPath expression or a resource id)
    @param by Strategy key, one of STRATEGIES
    """
    query: str
    by: str = DEFAULT_STRATEGY

    def __post_init__(self) -> None:
        if self.by not in STRATEGIES:
            raise ConfigError(f"Unknown locator strategy '{self.by}'. Allowed: {sorted(STRATEGIES)}")
        if not isinstance(self.query, str) or not self.query.strip():
            raise ConfigError("Locator query must be a non-empty string")

    @property
    def appium_by(self) -> str:
        return STRATEGIES[self.by]

    @classmethod
    def xpath(cls, query: str) -> Locator:
        return cls(query=query, by="xpath")

    @classmethod
    def id(cls, query: str) -> Locator:
        return cls(query=query, by="id")

    def __str__(self) -> str:
        return f"{self.by}={self.query!r}"
