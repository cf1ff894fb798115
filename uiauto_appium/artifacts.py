# uiauto_appium/artifacts.py
"""
Screenshot and page-source artifacts written during a scenario run.
Artifact capture never fails the scenario.
"""
from __future__ import annotations
import logging
import os
import time
from typing import Dict, Optional

from .session import Session

log = logging.getLogger("uiauto_appium")


def _ts() -> str:
    """Generate timestamp string for file naming."""
    return time.strftime("%Y%m%d_%H%M%S")


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def capture_screenshot(session: Session, out_dir: str, name: str) -> Optional[str]:
    """
    Save a PNG screenshot as <out_dir>/<name>.png.
    Returns the file path, or None if capture failed.
    """
    path = os.path.join(out_dir, f"{name}.png")
    try:
        ensure_dir(out_dir)
        if session.screenshot(path):
            return path
    except Exception as e:
        log.warning("Screenshot '%s' failed: %s", name, e)
    return None


def dump_page_source(session: Session, out_dir: str, name: str) -> Optional[str]:
    """Write the current UI hierarchy XML to <out_dir>/<name>.xml."""
    path = os.path.join(out_dir, f"{name}.xml")
    try:
        source = session.page_source()
        ensure_dir(out_dir)
        with open(path, "w", encoding="utf-8") as f:
            f.write(source)
        return path
    except Exception as e:
        log.warning("Page source dump '%s' failed: %s", name, e)
        return None


def make_artifacts(session: Session, out_dir: str, prefix: str) -> Dict[str, str]:
    """
    Returns dict like {"screenshot": "...", "tree": "..."} (only those that succeed).
    File names carry a timestamp so repeated failures do not overwrite each other.
    """
    artifacts: Dict[str, str] = {}
    stem = f"{prefix}_{_ts()}"
    img = capture_screenshot(session, out_dir, stem + "_screenshot")
    if img:
        artifacts["screenshot"] = img
    tree = dump_page_source(session, out_dir, stem + "_tree")
    if tree:
        artifacts["tree"] = tree
    return artifacts
