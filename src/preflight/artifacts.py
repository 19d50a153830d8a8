from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .contracts import PreflightResult


def serialize_preflight_result(result: PreflightResult) -> str:
    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_preflight_json(*, result: PreflightResult, out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_preflight_result(result), encoding="utf-8")
