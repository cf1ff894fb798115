# uiauto_appium/__init__.py
"""
UIAuto Appium - Android end-to-end scenario engine over Appium.

This package provides:
- Repository: YAML object map loading and validation
- Session: Appium driver lifecycle
- PollingLocator: bounded polling lookups that never raise on absence
- Actions: required/optional step primitive
- ScenarioRunner: search-and-filter scenario execution and reporting
- ProductExtractor: tolerant top-N result extraction
"""

from uiauto_appium.actions import Actions, StepPolicy
from uiauto_appium.config import TimeConfig
from uiauto_appium.element import Element
from uiauto_appium.exceptions import (
    ActionError,
    ConfigError,
    RequiredElementMissingError,
    SessionError,
    TimeoutError,
    UIAutoError,
)
from uiauto_appium.extractor import ExtractedProduct, ProductExtractor, format_products
from uiauto_appium.locator import Locator
from uiauto_appium.repository import Repository
from uiauto_appium.resolver import PollingLocator
from uiauto_appium.runner import ScenarioRunner, assert_products_found
from uiauto_appium.scenario import SEARCH_AND_FILTER_STEPS, Step
from uiauto_appium.session import Session
from uiauto_appium.waits import wait_until

__all__ = [
    "Actions",
    "StepPolicy",
    "TimeConfig",
    "Element",
    "ActionError",
    "ConfigError",
    "RequiredElementMissingError",
    "SessionError",
    "TimeoutError",
    "UIAutoError",
    "ExtractedProduct",
    "ProductExtractor",
    "format_products",
    "Locator",
    "Repository",
    "PollingLocator",
    "ScenarioRunner",
    "assert_products_found",
    "SEARCH_AND_FILTER_STEPS",
    "Step",
    "Session",
    "wait_until",
]

__version__ = "1.0.0"
