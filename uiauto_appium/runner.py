# uiauto_appium/runner.py
"""
@file runner.py
@brief Scenario runner: owns the session, runs the step table, extracts results, emits a report.
"""

from __future__ import annotations

import json
import os
import time
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from .actionlogger import ACTION_LOGGER
from .actions import Actions
from .artifacts import capture_screenshot, ensure_dir
from .config import TimeConfig
from .context import ActionContextManager
from .exceptions import ConfigError
from .extractor import ExtractedProduct, ProductExtractor
from .repository import Repository
from .resolver import PollingLocator
from .scenario import SEARCH_AND_FILTER_STEPS, Step
from .session import Session

SCENARIO_NAME = "search_and_filter"


def assert_products_found(products: Sequence[ExtractedProduct]) -> None:
    """The scenario's pass/fail signal: at least one product was extracted."""
    if len(products) < 1:
        raise AssertionError(f"Expected at least 1 extracted product, got {len(products)}")


class ScenarioRunner:
    """
    Runs the fixed search-and-filter scenario against one Appium session.

    Steps run strictly in order. A required step whose element is missing
    stops the run; an optional one is recorded as skipped. Settle delays
    come from the TimeConfig pause table and go through `sleep`.
    """

    def __init__(
        self,
        session: Session,
        repo: Repository,
        time_config: Optional[TimeConfig] = None,
        *,
        query: Optional[str] = None,
        limit: Optional[int] = None,
        artifacts_dir: Optional[str] = None,
        steps: Sequence[Step] = SEARCH_AND_FILTER_STEPS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        @param session Session owned by this runner for the run
        @param repo Object map with locators and scenario settings
        @param time_config Locator timeouts and settle delays (default preset if None)
        @param query Search text (object map value if None)
        @param limit Number of result cards to extract (object map value if None)
        @param artifacts_dir Screenshot directory (object map value if None)
        @param steps Step table
        @param sleep Blocking sleep used for settle delays
        @throws ConfigError on an empty query or a negative limit
        """
        self.session = session
        self.repo = repo
        self.time_config = time_config or TimeConfig.build_from()
        self.query = query if query is not None else repo.query
        self.limit = limit if limit is not None else repo.extraction.limit
        if not self.query.strip():
            raise ConfigError("Search query must not be empty")
        if self.limit < 0:
            raise ConfigError(f"limit must be >= 0, got {self.limit}")
        self.artifacts_dir = artifacts_dir or repo.app.artifacts_dir
        self.steps = tuple(steps)
        self._sleep = sleep

        self.locator = PollingLocator(session)
        self.actions = Actions(self.locator, repo, artifacts_dir=self.artifacts_dir)
        self.extractor = ProductExtractor.from_repository(self.locator, repo)

    def run(self, report_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Start the session, execute the scenario, assert on the results and
        quit the session whatever the outcome.

        @param report_path Optional JSON report output path
        @return Report dict with status "passed" or "failed"
        """
        run_id = str(uuid4())
        ACTION_LOGGER.set_run_id(run_id)
        start_ts = time.time()
        report: Dict[str, Any] = {
            "run_id": run_id,
            "scenario": SCENARIO_NAME,
            "app": self.repo.app.name,
            "query": self.query,
            "started_at": time.strftime("%Y-%m-%d %H:%M:%S"),
            "status": "unknown",
            "steps": [],
            "products": [],
            "errors": [],
        }

        try:
            self.session.start()
            products = self.execute(report["steps"])
            report["products"] = [p.to_dict() for p in products]
            assert_products_found(products)
            report["status"] = "passed"
        except Exception as e:
            report["status"] = "failed"
            report["errors"].append(f"{type(e).__name__}: {e}")
        finally:
            self.session.quit()
            ActionContextManager.clear()
            report["duration_sec"] = round(time.time() - start_ts, 3)

            if report_path:
                os.makedirs(os.path.dirname(os.path.abspath(report_path)) or ".", exist_ok=True)
                with open(report_path, "w", encoding="utf-8") as f:
                    json.dump(report, f, indent=2, ensure_ascii=False)

        return report

    def execute(self, records: Optional[List[Dict[str, Any]]] = None) -> List[ExtractedProduct]:
        """
        Run every step, then extract the top results. The session must
        already be started. Raises on the first required step that fails.
        """
        records = records if records is not None else []
        ensure_dir(self.artifacts_dir)
        for index, step in enumerate(self.steps, start=1):
            self.run_step(step, index, records)

        self._pause("before_extract_pause")
        return self.extractor.extract(self.limit)

    def run_step(self, step: Step, index: int, records: List[Dict[str, Any]]) -> bool:
        """Run one step and its screenshots and settle delay. Returns False if skipped."""
        rec: Dict[str, Any] = {
            "index": index,
            "name": step.name,
            "element": step.element,
            "policy": step.policy.value,
            "status": "running",
            "screenshots": [],
        }
        records.append(rec)
        started = time.time()

        ActionContextManager.clear()
        ACTION_LOGGER.log(event="step_start", step=step.name, element=step.element, metadata={"index": index})
        try:
            with ActionContextManager.action(f"step {step.name}"):
                done = self._perform(step)
            rec["status"] = "passed" if done else "skipped"
        except Exception as e:
            rec["status"] = "failed"
            rec["error"] = f"{type(e).__name__}: {e}"
            ctx = ActionContextManager.last_failed()
            if ctx:
                rec["action_trace"] = ctx.format_trace()
            raise
        finally:
            rec["duration_sec"] = round(time.time() - started, 3)
            ACTION_LOGGER.log(
                event="step_finish",
                step=step.name,
                element=step.element,
                status=rec["status"],
                duration_ms=int(rec["duration_sec"] * 1000),
            )

        self._screenshot(step.screenshot, rec)
        self._pause(step.pause)
        self._screenshot(step.settled_screenshot, rec)
        return done

    def _perform(self, step: Step) -> bool:
        timeout = self.time_config.timeout(step.timeout)
        if step.action == "type":
            return self.actions.type_and_submit(
                step.element,
                text=self.query,
                timeout=timeout,
                state=step.state,
                step=step.name,
            )
        return self.actions.tap(
            step.element,
            timeout=timeout,
            state=step.state,
            policy=step.policy,
            step=step.name,
        )

    def _pause(self, field: Optional[str]) -> None:
        seconds = self.time_config.pause(field)
        if seconds > 0:
            self._sleep(seconds)

    def _screenshot(self, name: Optional[str], rec: Dict[str, Any]) -> None:
        if not name:
            return
        path = capture_screenshot(self.session, self.artifacts_dir, name)
        if path:
            rec["screenshots"].append(path)
