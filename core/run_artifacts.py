"""Run artifact helpers for operational reporting."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any

from core.errors import OutputIOError


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = "reports",
) -> str:
    """Write a JSON run report and return its path.

    The report is written to a temporary file first and renamed, so a
    partially written report never appears under its final name.
    """
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"bindgen-{run_id}.json")
    tmp_path = f"{path}.tmp"
    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)
        os.replace(tmp_path, path)
    except OSError as exc:
        raise OutputIOError(f"failed to write run report: {exc}", path=path, operation="report") from exc
    return path
