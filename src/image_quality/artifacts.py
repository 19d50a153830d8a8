from __future__ import annotations

import json
from typing import Any

from .contracts import AssessmentReport


def serialize_assessment_report(report: AssessmentReport) -> str:
    payload: dict[str, Any] = report.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"
