"""Run artifact helpers for operational reporting."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = "output/run_reports",
) -> str:
    """Write a JSON run report and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path


def write_outline(
    outline: dict[str, list[dict[str, str]]],
    path: str,
) -> str:
    """Write the per-section declaration outline as JSON and return its path.

    Sections keep their encounter order; the globals section is keyed ``""``.
    """
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(outline, f, indent=2, ensure_ascii=False)
    return path
