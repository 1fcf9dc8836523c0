from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .descriptor import ModelDescriptor
from .errors import ShapeMismatch


@dataclass(frozen=True)
class NormalizationParams:
    center: Tuple[float, ...]
    scale: Tuple[float, ...]

    @classmethod
    def from_descriptor(cls, descriptor: Optional[ModelDescriptor]) -> Optional["NormalizationParams"]:
        if descriptor is None or descriptor.scaler_mean is None or descriptor.scaler_scale is None:
            return None
        return cls(tuple(descriptor.scaler_mean), tuple(descriptor.scaler_scale))


def normalize(values: Sequence[float], params: Optional[NormalizationParams]) -> np.ndarray:
    """Apply (x - center) / scale per feature, or pass the row through when no params are set."""
    row = np.asarray(values, dtype=np.float64)
    if params is None:
        return row
    n = row.shape[0]
    if len(params.center) != n or len(params.scale) != n:
        raise ShapeMismatch("Scaler length does not match feature count.")
    # zero scale yields inf, same as the browser client
    with np.errstate(divide="ignore", invalid="ignore"):
        return (row - np.asarray(params.center, dtype=np.float64)) / np.asarray(params.scale, dtype=np.float64)
