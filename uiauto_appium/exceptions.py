# uiauto_appium/exceptions.py
"""
@file exceptions.py
@brief Exception hierarchy for the Appium scenario engine.
"""

from __future__ import annotations

from typing import Dict, Optional


class UIAutoError(Exception):
    """Base exception for the framework."""
    pass


class ConfigError(UIAutoError):
    """Raised when the object map or timing configuration is invalid."""
    pass


class SessionError(UIAutoError):
    """Raised when the Appium session is missing or cannot be started."""
    pass


class TimeoutError(UIAutoError):
    """
    Raised when a wait times out.

    Keeps the last exception raised by the polled predicate so a caller that
    decides to surface the timeout can still tell what went wrong.

    Attributes:
        original_exception: The last exception raised before the timeout
        description: Human-readable description of what was being waited for
        timeout: The timeout value in seconds
        attempt_count: Number of predicate evaluations
        elapsed_time: Actual elapsed time in seconds
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.original_exception: Optional[BaseException] = None
        self.description: Optional[str] = None
        self.timeout: Optional[float] = None
        self.attempt_count: Optional[int] = None
        self.elapsed_time: Optional[float] = None

    def __str__(self) -> str:
        message = super().__str__()
        details = [
            label.format(value)
            for label, value in (
                ("Original exception: {}", self.original_exception and type(self.original_exception).__name__),
                ("Attempts: {}", self.attempt_count),
                ("Elapsed: {:.2f}s", self.elapsed_time),
            )
            if value is not None
        ]
        return f"{message} [{', '.join(details)}]" if details else message


class RequiredElementMissingError(UIAutoError):
    """
    Raised when a required step cannot resolve its element.

    The scenario aborts on this error; no later step runs.
    """

    def __init__(
        self,
        step: str,
        element: str,
        description: str,
        timeout: float,
        artifacts: Optional[Dict[str, str]] = None,
    ):
        self.step = step
        self.element = element
        self.description = description
        self.timeout = timeout
        self.artifacts = artifacts or {}
        super().__init__(self.__str__())

    def __str__(self) -> str:
        msg = (
            f"Could not find the {self.description} "
            f"(step='{self.step}' element='{self.element}' timeout={self.timeout}s)"
        )
        if self.artifacts:
            msg += f" artifacts={self.artifacts}"
        return msg


class ActionError(UIAutoError):
    """
    Raised when a resolved element rejects an interaction.

    Contains the action, the target element and the underlying backend cause.
    """

    def __init__(
        self,
        action: str,
        element_name: Optional[str] = None,
        details: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.action = action
        self.element_name = element_name
        self.details = details
        self.cause = cause
        super().__init__(self.__str__())

    def __str__(self) -> str:
        target = f" '{self.element_name}'" if self.element_name else ""
        text = f"Could not {self.action}{target}"
        if self.details:
            text += f" ({self.details})"
        if self.cause is not None:
            text += f": {type(self.cause).__name__}: {self.cause}"
        return text
