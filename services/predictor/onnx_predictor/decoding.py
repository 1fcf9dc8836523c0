import math
from typing import Iterable

import numpy as np

EMPTY_RESULT = "—"


def format_value(v: float) -> str:
    """Six fixed decimals, spelled the way the browser client's toFixed(6) does."""
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    if v == 0:
        v = 0.0
    return f"{v:.6f}"


def decode_result(values: Iterable[float]) -> str:
    flat = np.asarray(values, dtype=np.float64).ravel()
    if flat.size == 0:
        return EMPTY_RESULT
    return ", ".join(format_value(v) for v in flat.tolist())
