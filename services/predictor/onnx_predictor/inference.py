import logging
from typing import Sequence

import numpy as np

from .errors import EmptyInput, MissingOutput, ShapeMismatch
from .features import FeatureSchema
from .runners import ModelRunner

log = logging.getLogger("predictor.inference")


def check_shape(values: Sequence[float], schema: FeatureSchema) -> None:
    if len(values) == 0:
        raise EmptyInput("No input values provided.")
    if schema.named and len(values) != len(schema):
        raise ShapeMismatch(f"Expected {len(schema)} features, got {len(values)}.")


def build_input_tensor(values: Sequence[float]) -> np.ndarray:
    """Single row, [1, n_features], float32."""
    row = np.asarray(values, dtype=np.float32)
    return row.reshape(1, row.shape[0])


async def invoke(
    runner: ModelRunner,
    values: Sequence[float],
    input_name: str,
    output_name: str,
    schema: FeatureSchema,
) -> np.ndarray:
    check_shape(values, schema)
    tensor = build_input_tensor(values)
    log.debug(f"running model input={input_name} shape={list(tensor.shape)}")
    outputs = await runner.run({input_name: tensor})
    if output_name not in outputs:
        raise MissingOutput(f'Output named "{output_name}" not found. Check OUTPUT_NAME.')
    return np.asarray(outputs[output_name])
