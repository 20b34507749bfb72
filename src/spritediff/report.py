"""JSON report helpers."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from .compare import DiffResult
from .presets import CompareOptions


def report_dict(result: DiffResult, options: Optional[CompareOptions] = None) -> dict:
    data = {
        "changed": result.changed_categories(),
        "flags": result.to_dict(),
    }
    if options is not None:
        data["options"] = options.to_dict()
    return data


def write_json_report(
    result: DiffResult,
    path: str | Path,
    options: Optional[CompareOptions] = None,
) -> None:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    data = report_dict(result, options)
    with out_path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)


def diff_result_to_json(result: DiffResult, options: Optional[CompareOptions] = None) -> str:
    return json.dumps(report_dict(result, options), ensure_ascii=False, indent=2)
