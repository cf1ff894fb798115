# uiauto_appium/resolver.py
"""
@file resolver.py
@brief Polling locator: resolves a locator to an actionable element or returns None.
"""

from __future__ import annotations
from typing import Callable, List, Optional, Union

from .actionlogger import ACTION_LOGGER
from .element import Element
from .exceptions import SessionError, TimeoutError
from .locator import DEFAULT_STRATEGY, Locator
from .session import Session
from .timings import POLL_INTERVAL
from .waits import wait_until

DEFAULT_TIMEOUT = 15.0

LocatorLike = Union[Locator, str]


def _coerce(locator: LocatorLike, by: str) -> Locator:
    if isinstance(locator, Locator):
        return locator
    return Locator(query=locator, by=by)


class PollingLocator:
    """
    Bounded-time element lookup with a failure-absorbing contract.

    Lookups never raise for a missing, stale or not-yet-ready element; they
    return None and leave the decision to the caller. Handles are never
    cached: every poll queries the backend again.
    """

    def __init__(self, session: Session):
        self.session = session

    def wait_for_element(
        self,
        locator: LocatorLike,
        timeout: float = DEFAULT_TIMEOUT,
        by: str = DEFAULT_STRATEGY,
    ) -> Optional[Element]:
        """
        Wait until the element exists and is both visible and enabled.

        @param locator Locator, or a raw query string interpreted with `by`
        @param timeout Seconds to keep polling
        @param by Strategy used when locator is a string
        @return Element, or None when it did not become interactable in time
        """
        return self._poll(_coerce(locator, by), timeout, Element.is_interactable, "interactable")

    def wait_for_visible(
        self,
        locator: LocatorLike,
        timeout: float = DEFAULT_TIMEOUT,
        by: str = DEFAULT_STRATEGY,
    ) -> Optional[Element]:
        """Wait until the element exists and is visible. Enabled state is not checked."""
        return self._poll(_coerce(locator, by), timeout, Element.is_visible, "visible")

    def find_all(self, locator: LocatorLike, by: str = DEFAULT_STRATEGY) -> List[Element]:
        """Single snapshot of every element currently matching locator, in backend order."""
        loc = _coerce(locator, by)
        return [Element(handle, loc) for handle in self.session.find_elements(loc)]

    def _poll(
        self,
        locator: Locator,
        timeout: float,
        ready: Callable[[Element], bool],
        state: str,
    ) -> Optional[Element]:
        if not self.session.is_active:
            raise SessionError("Session not started. Call start() first.")

        def probe() -> Optional[Element]:
            element = Element(self.session.find_element(locator), locator)
            return element if ready(element) else None

        try:
            return wait_until(
                probe,
                timeout=timeout,
                interval=POLL_INTERVAL,
                description=f"{locator} to be {state}",
            )
        except TimeoutError as e:
            ACTION_LOGGER.log(
                event="element_not_found",
                status="warning",
                metadata={"locator": str(locator), "state": state, "timeout_s": timeout},
                exception=e.original_exception,
            )
            return None
