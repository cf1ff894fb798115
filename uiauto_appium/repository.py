# uiauto_appium/repository.py
"""
@file repository.py
@brief Loads the object map (YAML): app/session/search/extraction settings and named locators.
"""

from __future__ import annotations
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml
from jsonschema import Draft202012Validator

from .exceptions import ConfigError
from .locator import Locator

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_OBJECT_MAP = os.path.join(PACKAGE_DIR, "maps", "mercadolibre.yaml")
DEFAULT_SCHEMA = os.path.join(PACKAGE_DIR, "schemas", "object_map.schema.json")

# Element keys the search-and-filter scenario and the extractor look up.
SCENARIO_ELEMENTS = (
    "search_bar",
    "search_input",
    "filter_button",
    "condition_category",
    "condition_new",
    "shipping_category",
    "shipping_local",
    "included_controls_filter",
    "wifi_filter",
    "sort_category",
    "sort_price_desc",
    "show_results_button",
    "result_card",
    "card_title",
    "card_price",
)


@dataclass(frozen=True)
class AppConfig:
    name: str = "app"
    artifacts_dir: str = "screenshots"


@dataclass(frozen=True)
class SessionConfig:
    server_url: str = "http://127.0.0.1:4723"
    implicit_wait: float = 0.0
    capabilities: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExtractionConfig:
    limit: int = 2
    currency_marker: str = "Pesos"
    unavailable: str = "unavailable"


class Repository:
    """
    Loads an object map YAML, validates it against the JSON schema and gives
    access to the configuration sections and the element locators.
    """

    def __init__(self, path: str, schema_path: str = DEFAULT_SCHEMA, require_scenario_elements: bool = True):
        self.path = os.path.abspath(path)
        self._raw: Dict[str, Any] = self._load_yaml(self.path)
        self._validator = Draft202012Validator(self._load_schema(schema_path))
        self._validate(require_scenario_elements)

        self._app = self._parse_app_config(self._raw.get("app") or {})
        self._session = self._parse_session_config(self._raw.get("session") or {})
        self._extraction = self._parse_extraction_config(self._raw.get("extraction") or {})
        self._query = str((self._raw.get("search") or {}).get("query", ""))
        self._elements: Dict[str, Dict[str, Any]] = self._raw.get("elements") or {}

    @classmethod
    def default(cls) -> Repository:
        """Repository for the object map shipped with the package."""
        return cls(DEFAULT_OBJECT_MAP)

    @staticmethod
    def _load_yaml(path: str) -> Dict[str, Any]:
        if not os.path.exists(path):
            raise ConfigError(f"Object map YAML not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Object map YAML must be a mapping at root.")
        return data

    @staticmethod
    def _load_schema(path: str) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _validate(self, require_scenario_elements: bool) -> None:
        errors = sorted(self._validator.iter_errors(self._raw), key=lambda e: list(e.path))
        if errors:
            lines = [f"Object map validation failed: {self.path}"]
            for e in errors:
                lines.append(f"- {list(e.path)}: {e.message}")
            raise ConfigError("\n".join(lines))

        elements = self._raw.get("elements") or {}
        for name, spec in elements.items():
            try:
                Locator(query=spec["query"], by=spec.get("by", "xpath"))
            except ConfigError as e:
                raise ConfigError(f"elements.{name}: {e}") from e

        if require_scenario_elements:
            missing = [name for name in SCENARIO_ELEMENTS if name not in elements]
            if missing:
                raise ConfigError(f"Object map is missing scenario elements: {missing}")
            if not str((self._raw.get("search") or {}).get("query", "")).strip():
                raise ConfigError("Object map has no search.query for the scenario")

    @staticmethod
    def _parse_app_config(d: Dict[str, Any]) -> AppConfig:
        return AppConfig(
            name=str(d.get("name", "app")),
            artifacts_dir=str(d.get("artifacts_dir", "screenshots")),
        )

    @staticmethod
    def _parse_session_config(d: Dict[str, Any]) -> SessionConfig:
        return SessionConfig(
            server_url=str(d.get("server_url", "http://127.0.0.1:4723")),
            implicit_wait=float(d.get("implicit_wait", 0.0)),
            capabilities=dict(d.get("capabilities") or {}),
        )

    @staticmethod
    def _parse_extraction_config(d: Dict[str, Any]) -> ExtractionConfig:
        return ExtractionConfig(
            limit=int(d.get("limit", 2)),
            currency_marker=str(d.get("currency_marker", "Pesos")),
            unavailable=str(d.get("unavailable", "unavailable")),
        )

    @property
    def app(self) -> AppConfig:
        return self._app

    @property
    def session(self) -> SessionConfig:
        return self._session

    @property
    def extraction(self) -> ExtractionConfig:
        return self._extraction

    @property
    def query(self) -> str:
        return self._query

    def get_element_spec(self, name: str) -> Dict[str, Any]:
        if name not in self._elements:
            raise ConfigError(f"Unknown element: {name}")
        return self._elements[name]

    def get_locator(self, name: str) -> Locator:
        spec = self.get_element_spec(name)
        return Locator(query=spec["query"], by=spec.get("by", "xpath"))

    def describe(self, name: str) -> str:
        """Human description of an element, falling back to its key."""
        spec = self.get_element_spec(name)
        return str(spec.get("description") or name.replace("_", " "))

    def list_elements(self) -> List[str]:
        return sorted(self._elements.keys())


def load_capabilities(path: str) -> Dict[str, Any]:
    """
    Load Appium capabilities from a YAML or JSON file.

    A top-level 'caps' or 'capabilities' mapping is unwrapped.
    """
    if not os.path.exists(path):
        raise ConfigError(f"Capabilities file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid capabilities file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Capabilities file must hold a mapping: {path}")
    for key in ("capabilities", "caps"):
        if isinstance(data.get(key), dict):
            return dict(data[key])
    return data


def with_session_overrides(
    config: SessionConfig,
    server_url: Optional[str] = None,
    capabilities: Optional[Dict[str, Any]] = None,
) -> SessionConfig:
    """Return a SessionConfig with the given fields replaced."""
    return SessionConfig(
        server_url=server_url or config.server_url,
        implicit_wait=config.implicit_wait,
        capabilities=dict(capabilities) if capabilities is not None else dict(config.capabilities),
    )
