# uiauto_appium/config.py
"""
@file config.py
@brief Run-scope timing configuration: locator timeouts and the settle-delay table.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from .exceptions import ConfigError
from .timings import (PAUSE_FIELDS, TIMEOUT_FIELDS, build_preset_values,
                      list_presets)


class TimeConfig:
    """
    Timing snapshot for one scenario run.

    Precedence is applied once when the snapshot is built:
      base defaults -> preset -> overrides
    The runner receives the snapshot explicitly; there is no process-wide
    instance.
    """

    def __init__(self, preset: Optional[str] = None):
        self.preset = (preset or "default").lower()
        try:
            values = build_preset_values(self.preset)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        self._apply_values(values)

    @classmethod
    def _timeout_fields(cls) -> Dict[str, float]:
        return TIMEOUT_FIELDS

    @classmethod
    def _pause_fields(cls) -> Dict[str, float]:
        return PAUSE_FIELDS

    def _apply_values(self, values: Dict[str, Any]) -> None:
        for name in list(self._timeout_fields()) + list(self._pause_fields()):
            if name not in values:
                raise ConfigError(f"Missing timing setting for {name}")
            value = float(values[name])
            if value < 0:
                raise ConfigError(f"Timing setting {name} must be >= 0, got {value}")
            setattr(self, name, value)

    def to_dict(self) -> Dict[str, float]:
        data: Dict[str, float] = {}
        for name in self._timeout_fields():
            data[name] = getattr(self, name)
        for name in self._pause_fields():
            data[name] = getattr(self, name)
        return data

    def clone(self) -> TimeConfig:
        """Return an independent copy of this config."""
        clone = TimeConfig(self.preset)
        clone._apply_values(self.to_dict())
        return clone

    def timeout(self, field: str) -> float:
        """Locator timeout in seconds for a timeout field name."""
        if field not in self._timeout_fields():
            raise ConfigError(f"Unknown timeout field: {field}")
        return getattr(self, field)

    def pause(self, field: Optional[str]) -> float:
        """Settle delay in seconds for a pause field name (None means no delay)."""
        if field is None:
            return 0.0
        if field not in self._pause_fields():
            raise ConfigError(f"Unknown pause field: {field}")
        return getattr(self, field)

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> TimeConfig:
        """Build a deterministic run-scope config snapshot."""
        cfg = cls(preset)
        if overrides:
            _apply_overrides(cfg, overrides)
        return cfg


def _apply_overrides(config: TimeConfig, overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key not in config._timeout_fields() and key not in config._pause_fields():
            raise ConfigError(f"Unknown TimeConfig field: {key}")
        try:
            seconds = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid override for {key}: {value!r}") from e
        if seconds < 0:
            raise ConfigError(f"Override for {key} must be >= 0, got {seconds}")
        setattr(config, key, seconds)


def timeout_overrides(timeout: float) -> Dict[str, float]:
    """Overrides that set every locator wait from one base timeout."""
    overrides = {name: float(timeout) for name in TIMEOUT_FIELDS}
    overrides["results_confirm_wait"] = max(timeout / 5, 0.5)
    return overrides


def available_presets() -> Dict[str, Dict[str, Any]]:
    return list_presets()
