"""
@file actionlogger.py
@brief Scenario event log: step, wait, action and extraction events as text lines or JSON lines.
"""

from __future__ import annotations

import json
import os
import threading
import traceback
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

FORMATS = ("line", "jsonl")
MASK_VISIBLE_CHARS = 10

# Keys rendered as dedicated columns in line format, in order.
_LINE_COLUMNS = ("action", "step", "element", "status", "duration_ms", "run_id")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def mask_text(text: str, visible: int = MASK_VISIBLE_CHARS) -> str:
    """Keep the first `visible` characters of typed text."""
    return text if len(text) <= visible else f"{text[:visible]}..."


def describe_exception(exc: BaseException, max_chars: int) -> Dict[str, Any]:
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).strip()
    if len(tb) > max_chars:
        tb = tb[:max_chars] + "...<truncated>"
    cause = exc.__cause__
    return {
        "type": type(exc).__name__,
        "message": str(exc),
        "traceback": tb,
        "cause_type": None if cause is None else type(cause).__name__,
        "cause_message": None if cause is None else str(cause),
    }


@dataclass
class LoggerSettings:
    console: bool = True
    file_path: Optional[str] = None
    level: str = "INFO"
    format: str = "line"
    max_traceback_chars: int = 4000


@dataclass
class ActionEvent:
    """One emitted event."""
    event: str
    run_id: str
    level: str = "INFO"
    action: Optional[str] = None
    step: Optional[str] = None
    element: Optional[str] = None
    status: str = "ok"
    duration_ms: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Dict[str, Any]] = None
    ts: str = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data["exception"] is None:
            del data["exception"]
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"), default=str)

    def to_line(self) -> str:
        # HH:MM:SS of the UTC timestamp
        parts = [self.ts[11:19], self.level, f"event={self.event}"]
        for key in _LINE_COLUMNS:
            value = getattr(self, key)
            if value is None or value == "":
                continue
            parts.append(f"{key}='{value}'" if key in ("step", "element") else f"{key}={value}")
        parts.extend(f"{k}={v}" for k, v in self.metadata.items())
        if self.exception:
            parts.append(f"exc_type={self.exception['type']}")
            parts.append(f"exc_message={self.exception['message']}")
        return " | ".join(parts)


class ActionLogger:
    """
    Thread-safe scenario event logger.

    Disabled until enable() is called; the CLI turns it on from the
    UIAUTO_ACTION_LOG* environment variables. Events go to stdout and,
    when a file path is configured, are appended to that file.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._enabled = False
        self._run_id = "default"
        self._settings = LoggerSettings()

    @property
    def settings(self) -> LoggerSettings:
        return self._settings

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        run_id: Optional[str] = None,
        format: str = "line",
        max_traceback_chars: int = 4000,
    ) -> None:
        fmt = (format or "line").lower()
        if fmt not in FORMATS:
            raise ValueError(f"ActionLogger format must be one of {FORMATS}, got '{format}'")

        settings = LoggerSettings(
            console=bool(console),
            file_path=file_path,
            level=level.upper(),
            format=fmt,
            max_traceback_chars=max(256, int(max_traceback_chars)),
        )
        with self._lock:
            self._settings = settings
            if run_id:
                self._run_id = run_id

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def run_id(self) -> str:
        return self._run_id

    def set_run_id(self, run_id: str) -> None:
        if run_id:
            with self._lock:
                self._run_id = run_id

    def log(
        self,
        *,
        event: str,
        action: Optional[str] = None,
        step: Optional[str] = None,
        element: Optional[str] = None,
        status: str = "ok",
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        """Emit one event. No-op while disabled."""
        if not self._enabled:
            return

        settings = self._settings
        meta = dict(metadata or {})
        if action == "type" and "text" in meta:
            meta["text"] = mask_text(str(meta["text"]))

        record = ActionEvent(
            event=event,
            run_id=self._run_id,
            level=settings.level,
            action=action,
            step=step,
            element=element,
            status=status,
            duration_ms=duration_ms,
            metadata=meta,
            exception=None if exception is None else describe_exception(exception, settings.max_traceback_chars),
        )
        self._emit(record.to_json() if settings.format == "jsonl" else record.to_line(), settings)

    def _emit(self, text: str, settings: LoggerSettings) -> None:
        with self._lock:
            if settings.console:
                print(text, flush=True)
            if settings.file_path:
                try:
                    os.makedirs(os.path.dirname(os.path.abspath(settings.file_path)) or ".", exist_ok=True)
                    with open(settings.file_path, "a", encoding="utf-8") as f:
                        f.write(text + "\n")
                except OSError:
                    # logging must never break a run
                    pass


ACTION_LOGGER = ActionLogger()
