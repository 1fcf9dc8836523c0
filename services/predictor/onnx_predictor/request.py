"""Turn the two request shapes (pasted CSV row, per-feature values) into one row."""
import math
from typing import List, Mapping, Optional

from .errors import InvalidInput
from .features import FeatureSchema


def parse_csv_row(text: str, lenient: bool = True) -> List[float]:
    row = []
    for token in text.split(","):
        token = token.strip()
        try:
            value = float(token)
        except ValueError:
            value = math.nan
        if math.isnan(value):
            if lenient:
                continue
            raise InvalidInput(f"Not a number: {token!r}")
        row.append(value)
    return row


def row_values(
    schema: FeatureSchema,
    csv_row: Optional[str] = None,
    features: Optional[Mapping[str, float]] = None,
    lenient: bool = True,
) -> List[float]:
    """The pasted row wins when non-blank; otherwise read named values in schema order."""
    csv = (csv_row or "").strip()
    if csv:
        return parse_csv_row(csv, lenient=lenient)
    if schema.named:
        features = features or {}
        return [float(features.get(name, 0.0)) for name in schema.names]
    return []
