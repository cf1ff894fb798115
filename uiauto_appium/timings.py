# uiauto_appium/timings.py
"""
@file timings.py
@brief Locator timeouts, settle delays and presets for the scenario.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


# Fixed polling cadence of the element locator (Selenium wait default).
# Not a preset field.
POLL_INTERVAL = 0.2

TIMEOUT_FIELDS: Dict[str, float] = {
    "element_wait": 15.0,
    "search_bar_wait": 30.0,
    "search_input_wait": 15.0,
    "filter_menu_wait": 10.0,
    "filter_option_wait": 10.0,
    "results_confirm_wait": 3.0,
}

# Static settle delays applied after a step. The app re-renders lists after
# a filter commit without any signal the locator can poll for.
PAUSE_FIELDS: Dict[str, float] = {
    "after_tap_pause": 1.0,
    "after_search_submit_pause": 3.0,
    "after_filter_menu_pause": 2.0,
    "after_shipping_pause": 2.0,
    "after_results_pause": 4.0,
    "before_extract_pause": 2.0,
}

PRESET_OVERRIDES: Dict[str, Dict[str, float]] = {
    "fast": {
        "element_wait": 8.0,
        "search_bar_wait": 15.0,
        "search_input_wait": 8.0,
        "filter_menu_wait": 6.0,
        "filter_option_wait": 6.0,
        "results_confirm_wait": 2.0,
        "after_tap_pause": 0.5,
        "after_search_submit_pause": 2.0,
        "after_filter_menu_pause": 1.0,
        "after_shipping_pause": 1.0,
        "after_results_pause": 2.0,
        "before_extract_pause": 1.0,
    },
    "slow": {
        "element_wait": 25.0,
        "search_bar_wait": 45.0,
        "search_input_wait": 25.0,
        "filter_menu_wait": 20.0,
        "filter_option_wait": 20.0,
        "results_confirm_wait": 5.0,
        "after_tap_pause": 1.5,
        "after_search_submit_pause": 5.0,
        "after_filter_menu_pause": 3.0,
        "after_shipping_pause": 3.0,
        "after_results_pause": 6.0,
        "before_extract_pause": 3.0,
    },
    "ci": {
        "element_wait": 30.0,
        "search_bar_wait": 60.0,
        "search_input_wait": 30.0,
        "filter_menu_wait": 20.0,
        "filter_option_wait": 20.0,
        "results_confirm_wait": 5.0,
        "after_tap_pause": 2.0,
        "after_search_submit_pause": 6.0,
        "after_filter_menu_pause": 4.0,
        "after_shipping_pause": 4.0,
        "after_results_pause": 8.0,
        "before_extract_pause": 4.0,
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, float]:
    preset_key = (preset or "default").lower()
    values: Dict[str, float] = {}
    values.update(deepcopy(TIMEOUT_FIELDS))
    values.update(deepcopy(PAUSE_FIELDS))

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    values.update(overrides)
    return values
