# uiauto_appium/scenario.py
"""
@file scenario.py
@brief Step table of the search-and-filter scenario.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .actions import STATES, StepPolicy
from .timings import PAUSE_FIELDS, TIMEOUT_FIELDS

ACTIONS = ("tap", "type")


@dataclass(frozen=True)
class Step:
    """
    One step of the scenario.

    @param name Step name used in reports and logs
    @param element Element key in the object map
    @param action "tap" or "type" (type then submit with ENTER)
    @param policy REQUIRED aborts the scenario when the element is missing
    @param state Locator variant: "enabled" (visible and enabled) or "visible"
    @param timeout TimeConfig timeout field for the lookup
    @param pause TimeConfig pause field slept after the step, or None
    @param screenshot Screenshot name taken right after the action
    @param settled_screenshot Screenshot name taken after the pause
    """
    name: str
    element: str
    action: str = "tap"
    policy: StepPolicy = StepPolicy.REQUIRED
    state: str = "enabled"
    timeout: str = "element_wait"
    pause: Optional[str] = "after_tap_pause"
    screenshot: Optional[str] = None
    settled_screenshot: Optional[str] = None

    def __post_init__(self) -> None:
        if self.action not in ACTIONS:
            raise ValueError(f"Step {self.name}: unknown action '{self.action}'")
        if self.state not in STATES:
            raise ValueError(f"Step {self.name}: unknown state '{self.state}'")
        if self.timeout not in TIMEOUT_FIELDS:
            raise ValueError(f"Step {self.name}: unknown timeout field '{self.timeout}'")
        if self.pause is not None and self.pause not in PAUSE_FIELDS:
            raise ValueError(f"Step {self.name}: unknown pause field '{self.pause}'")


SEARCH_AND_FILTER_STEPS: Tuple[Step, ...] = (
    # Search
    Step("open_search", "search_bar", timeout="search_bar_wait", screenshot="step_open_app"),
    Step(
        "enter_query",
        "search_input",
        action="type",
        timeout="search_input_wait",
        pause="after_search_submit_pause",
        screenshot="busqueda",
        settled_screenshot="step_search",
    ),
    Step(
        "open_filters",
        "filter_button",
        timeout="filter_menu_wait",
        pause="after_filter_menu_pause",
        settled_screenshot="step_filter_open",
    ),
    # Condition -> New
    Step("select_condition", "condition_category", state="visible", timeout="filter_option_wait"),
    Step(
        "apply_condition_new",
        "condition_new",
        state="visible",
        timeout="filter_option_wait",
        screenshot="filtro_condicion",
    ),
    # Shipping -> Local
    Step("select_shipping", "shipping_category", state="visible", timeout="filter_option_wait"),
    Step(
        "apply_shipping_local",
        "shipping_local",
        state="visible",
        timeout="filter_option_wait",
        pause="after_shipping_pause",
        screenshot="envios",
    ),
    # Category-specific sub-filters; not every result set offers them.
    Step(
        "toggle_included_controls",
        "included_controls_filter",
        policy=StepPolicy.OPTIONAL,
        state="visible",
        timeout="filter_option_wait",
    ),
    Step(
        "toggle_wifi",
        "wifi_filter",
        policy=StepPolicy.OPTIONAL,
        state="visible",
        timeout="filter_option_wait",
    ),
    # Sort -> highest price
    Step("select_sort", "sort_category", state="visible", timeout="filter_option_wait"),
    Step(
        "apply_sort_price_desc",
        "sort_price_desc",
        state="visible",
        timeout="filter_option_wait",
        screenshot="filtro_orden",
    ),
    # Back to results; the app sometimes lands there on its own.
    Step(
        "show_results",
        "show_results_button",
        policy=StepPolicy.OPTIONAL,
        state="visible",
        timeout="results_confirm_wait",
        pause="after_results_pause",
        screenshot="resultados",
    ),
)
