from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from .descriptor import ModelDescriptor


class SchemaSource(str, Enum):
    DESCRIPTOR = "descriptor"
    STATIC_NAMES = "static_names"
    STATIC_COUNT = "static_count"
    FREE_FORM = "free_form"


@dataclass(frozen=True)
class FeatureSchema:
    names: Tuple[str, ...]
    source: SchemaSource

    @property
    def named(self) -> bool:
        return len(self.names) > 0

    def __len__(self) -> int:
        return len(self.names)


def synthesize_names(count: int) -> Tuple[str, ...]:
    return tuple(f"f{i}" for i in range(1, count + 1))


def resolve_feature_schema(
    descriptor: Optional[ModelDescriptor],
    static_names: Sequence[str] = (),
    static_count: int = 0,
) -> FeatureSchema:
    """Pick the feature names the model expects.

    Precedence: descriptor names, then static names, then ``f1..fN`` from the
    static count, then free-form (empty).
    """
    if descriptor is not None and descriptor.feature_names:
        return FeatureSchema(tuple(descriptor.feature_names), SchemaSource.DESCRIPTOR)
    if static_names:
        return FeatureSchema(tuple(static_names), SchemaSource.STATIC_NAMES)
    if isinstance(static_count, int) and not isinstance(static_count, bool) and static_count > 0:
        return FeatureSchema(synthesize_names(static_count), SchemaSource.STATIC_COUNT)
    return FeatureSchema((), SchemaSource.FREE_FORM)
