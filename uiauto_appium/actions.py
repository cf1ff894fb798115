# uiauto_appium/actions.py
"""
@file actions.py
@brief Required/optional step primitive: resolve an element from the object map and act on it.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Union

from appium.webdriver.extensions.android.nativekey import AndroidKey

from .actionlogger import ACTION_LOGGER
from .artifacts import make_artifacts
from .context import tracked_action
from .element import Element
from .exceptions import ActionError, RequiredElementMissingError
from .repository import Repository
from .resolver import PollingLocator


class StepPolicy(str, Enum):
    """What a step does when its element cannot be resolved."""
    REQUIRED = "required"
    OPTIONAL = "optional"


STATES = ("enabled", "visible")


class Actions:
    """
    Keyword actions over named elements.

    A REQUIRED lookup that comes back empty raises RequiredElementMissingError
    and aborts the scenario. An OPTIONAL lookup or interaction that fails is
    logged and reported as False so the scenario carries on.
    """

    def __init__(self, locator: PollingLocator, repo: Repository, artifacts_dir: Optional[str] = None):
        """
        @param locator Polling locator bound to the running session
        @param repo Object map with the element locators
        @param artifacts_dir Where failure artifacts go (defaults to the object map's)
        """
        self.locator = locator
        self.repo = repo
        self.session = locator.session
        self.artifacts_dir = artifacts_dir or repo.app.artifacts_dir

    def acquire(
        self,
        element: str,
        *,
        timeout: float,
        state: str = "enabled",
        policy: Union[StepPolicy, str] = StepPolicy.REQUIRED,
        step: Optional[str] = None,
    ) -> Optional[Element]:
        """
        Resolve a named element with the policy applied.

        @param element Element key from the object map
        @param timeout Seconds the locator may poll
        @param state "enabled" (visible and enabled) or "visible"
        @param policy StepPolicy.REQUIRED or StepPolicy.OPTIONAL
        @param step Step name for error messages and logs
        @return Element, or None for an optional element that was not found
        @throws RequiredElementMissingError for a required element that was not found
        """
        policy = StepPolicy(policy)
        loc = self.repo.get_locator(element)

        if state == "enabled":
            found = self.locator.wait_for_element(loc, timeout=timeout)
        elif state == "visible":
            found = self.locator.wait_for_visible(loc, timeout=timeout)
        else:
            raise ValueError(f"Unknown state: {state}. Use one of {STATES}")

        if found is not None:
            return found

        if policy is StepPolicy.REQUIRED:
            artifacts = make_artifacts(self.session, self.artifacts_dir, f"missing_{element}")
            raise RequiredElementMissingError(
                step=step or element,
                element=element,
                description=self.repo.describe(element),
                timeout=timeout,
                artifacts=artifacts,
            )

        ACTION_LOGGER.log(
            event="optional_skip",
            step=step,
            element=element,
            status="skipped",
            metadata={"reason": "not found", "timeout_s": timeout},
        )
        return None

    @tracked_action("tap")
    def tap(
        self,
        element: str,
        *,
        timeout: float,
        state: str = "enabled",
        policy: Union[StepPolicy, str] = StepPolicy.REQUIRED,
        step: Optional[str] = None,
    ) -> bool:
        """Tap a named element. Returns False when an optional tap was skipped."""
        policy = StepPolicy(policy)
        el = self.acquire(element, timeout=timeout, state=state, policy=policy, step=step)
        if el is None:
            return False
        try:
            el.click()
        except Exception as e:
            if policy is StepPolicy.OPTIONAL:
                ACTION_LOGGER.log(
                    event="optional_skip",
                    step=step,
                    element=element,
                    status="skipped",
                    metadata={"reason": "tap failed"},
                    exception=e,
                )
                return False
            raise ActionError("tap", element_name=element, cause=e) from e
        return True

    @tracked_action("type")
    def type_and_submit(
        self,
        element: str,
        text: str,
        *,
        timeout: float,
        state: str = "enabled",
        step: Optional[str] = None,
        keycode: int = AndroidKey.ENTER,
    ) -> bool:
        """
        Type text into a required element, then submit with a hardware key
        (ENTER by default) instead of tapping a UI button.
        """
        el = self.acquire(element, timeout=timeout, state=state, policy=StepPolicy.REQUIRED, step=step)
        try:
            el.type_text(text)
            self.session.press_key(keycode)
        except Exception as e:
            raise ActionError("type", element_name=element, details=f"keycode={keycode}", cause=e) from e
        return True
