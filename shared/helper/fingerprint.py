"""Cheap content fingerprint for tabular datasets.

The fingerprint is a lossy summary used to detect that a dataset changed, not a
cryptographic digest. Two different datasets can share a fingerprint; callers rely
on the equality semantics below, so keep it that way.

Format: ``{record_count}_{field_count}_{rounded_sum}_{latest_date}``
"""

import math
import re
from collections.abc import Mapping
from typing import Any

EMPTY_FINGERPRINT = "empty_0_0"
NO_DATE = "nodate"

_DATE_PATTERN = re.compile(r"\d{2}/\d{2}/\d{4}", re.ASCII)
# thousands-grouped with comma decimal, e.g. "1.234,56"
_EUROPEAN_NUMBER_PATTERN = re.compile(r"-?\d{1,3}(\.\d{3})+,\d+", re.ASCII)
_PLAIN_NUMBER_PATTERN = re.compile(r"-?\d+(\.\d+)?", re.ASCII)


def generate_data_hash(data: Any) -> str:
    """Compute the fingerprint of a dataset.

    Args:
        data (Any): A list or tuple of records (mappings). Anything else is treated as empty.

    Returns:
        str: The fingerprint, or ``EMPTY_FINGERPRINT`` for empty or non-sequence input.
    """
    if not isinstance(data, (list, tuple)) or len(data) == 0:
        return EMPTY_FINGERPRINT

    field_names: set[str] = set()
    numeric_sum = 0.0
    latest_date = ""

    for row in data:
        if not isinstance(row, Mapping):
            continue

        for key, value in row.items():
            field_names.add(str(key))

            if isinstance(value, str):
                # lexicographic max on purpose: dd/mm/yyyy strings do not sort chronologically
                if _DATE_PATTERN.fullmatch(value) and value > latest_date:
                    latest_date = value
                numeric_sum += _parse_text_number(value)
            elif _is_real_number(value):
                numeric_sum += _finite_or_zero(value)

    return f"{len(data)}_{len(field_names)}_{_format_sum(numeric_sum)}_{latest_date or NO_DATE}"


def _is_real_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _finite_or_zero(value: int | float) -> float:
    # ints beyond the float range overflow instead of becoming inf
    try:
        as_float = float(value)
    except OverflowError:
        return 0.0
    return as_float if math.isfinite(as_float) else 0.0


def _parse_text_number(value: str) -> float:
    """Return the numeric contribution of a text value, 0 if it is not a finite number."""
    if _EUROPEAN_NUMBER_PATTERN.fullmatch(value):
        parsed = float(value.replace(".", "").replace(",", "."))
    elif _PLAIN_NUMBER_PATTERN.fullmatch(value):
        parsed = float(value)
    else:
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def _format_sum(value: float) -> str:
    """Round half up to two decimals, rendering integral sums without a decimal part."""
    scaled = value * 100
    if not math.isfinite(scaled):
        return repr(value)
    rounded = math.floor(scaled + 0.5) / 100
    if rounded == int(rounded):
        return str(int(rounded))
    return repr(rounded)
