"""Decodes the loosely-typed ``analysis_results`` payload written by the analyzer."""

import json
from typing import Any

from app.documents.models import AnalysisResult, Mismatch
from app.logging.logger import Log


class _PayloadError(ValueError):
    """Internal marker for a malformed payload; never escapes this module."""


def decode_analysis_result(raw: Any) -> AnalysisResult | None:
    """Build an AnalysisResult from raw JSON text or an already-decoded mapping.

    A malformed payload is treated exactly like an absent one: the function
    logs a warning and returns None instead of raising.
    """
    if raw is None:
        return None
    try:
        data = _load(raw)
        if data is None:
            return None
        return _build_result(data)
    except _PayloadError as exc:
        Log.warning(f"Ignoring malformed analysis result: {exc}")
        return None


def _load(raw: Any) -> dict[str, Any] | None:
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        if not raw.strip():
            return None
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise _PayloadError(f"invalid JSON: {exc}") from exc
        # Some writers double-encode the payload.
        if isinstance(raw, str):
            return _load(raw)
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise _PayloadError("payload must be an object")
    return raw


def _build_result(data: dict[str, Any]) -> AnalysisResult:
    mismatches_raw = _get(data, "mismatches", "mismatches")
    if mismatches_raw is None:
        mismatches_raw = []
    if not isinstance(mismatches_raw, list):
        raise _PayloadError("'mismatches' must be a list")
    mismatches = [_build_mismatch(item, i) for i, item in enumerate(mismatches_raw)]

    mismatch_count = _get(data, "mismatch_count", "mismatchCount")
    return AnalysisResult(
        total_records=int(_number(_get(data, "total_records", "totalRecords"), "total_records")),
        mismatch_count=(
            len(mismatches)
            if mismatch_count is None
            else int(_number(mismatch_count, "mismatch_count"))
        ),
        mismatch_rate=_number(_get(data, "mismatch_rate", "mismatchRate"), "mismatch_rate"),
        mismatches=mismatches,
    )


def _build_mismatch(raw: Any, index: int) -> Mismatch:
    if not isinstance(raw, dict):
        raise _PayloadError(f"mismatch at index {index} must be an object")
    label = raw.get("label")
    if not isinstance(label, str):
        raise _PayloadError(f"mismatch at index {index}: 'label' must be a string")
    return Mismatch(
        label=label,
        volume=_number(raw.get("volume"), f"mismatches[{index}].volume"),
        unit_price=_number(_get(raw, "unit_price", "unitPrice"), f"mismatches[{index}].unit_price"),
        expected_amount=_number(
            _get(raw, "expected_amount", "expectedAmount"),
            f"mismatches[{index}].expected_amount",
        ),
        actual_amount=_number(
            _get(raw, "actual_amount", "actualAmount"),
            f"mismatches[{index}].actual_amount",
        ),
        delta=_number(raw.get("delta"), f"mismatches[{index}].delta"),
    )


def _get(data: dict[str, Any], snake: str, camel: str) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel)


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _PayloadError(f"'{name}' must be a number")
    return float(value)
