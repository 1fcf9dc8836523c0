import numpy as np
import pytest

from onnx_predictor.descriptor import ModelDescriptor
from onnx_predictor.errors import ShapeMismatch
from onnx_predictor.preprocessing import NormalizationParams, normalize


def test_no_params_passthrough():
    assert normalize([1.5, -2.0], None).tolist() == [1.5, -2.0]


def test_affine():
    p = NormalizationParams(center=(1.0, 1.0), scale=(2.0, 2.0))
    assert normalize([3.0, 5.0], p).tolist() == [1.0, 2.0]


def test_affine_per_feature():
    x = [10.0, -3.0, 0.5]
    p = NormalizationParams(center=(4.0, 1.0, 0.5), scale=(3.0, 0.5, 8.0))
    out = normalize(x, p)
    expected = [(x[i] - p.center[i]) / p.scale[i] for i in range(3)]
    assert np.allclose(out, expected)


@pytest.mark.parametrize("center,scale", [((0.0,), (1.0, 1.0)), ((0.0, 0.0, 0.0), (1.0, 1.0, 1.0)), ((0.0, 0.0), (1.0,))])
def test_length_mismatch_rejected(center, scale):
    with pytest.raises(ShapeMismatch):
        normalize([1.0, 2.0], NormalizationParams(center, scale))


def test_from_descriptor_requires_both_arrays():
    assert NormalizationParams.from_descriptor(None) is None
    assert NormalizationParams.from_descriptor(ModelDescriptor(scaler_mean=[0.0])) is None
    p = NormalizationParams.from_descriptor(ModelDescriptor(scaler_mean=[0, 1], scaler_scale=[2, 3]))
    assert p == NormalizationParams((0.0, 1.0), (2.0, 3.0))
