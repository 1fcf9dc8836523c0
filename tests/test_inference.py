import numpy as np
import pytest

from onnx_predictor.errors import EmptyInput, MissingOutput, ShapeMismatch
from onnx_predictor.features import resolve_feature_schema
from onnx_predictor.inference import build_input_tensor, invoke
from tests.conftest import FakeRunner

NAMED3 = resolve_feature_schema(None, [], 3)
FREE = resolve_feature_schema(None, [], 0)


def test_tensor_shape_and_dtype():
    t = build_input_tensor([1, 2.5])
    assert t.shape == (1, 2)
    assert t.dtype == np.float32
    assert t.tolist() == [[1.0, 2.5]]


@pytest.mark.asyncio
async def test_feeds_named_input_and_reads_named_output():
    runner = FakeRunner(output_name="yhat")
    out = await invoke(runner, [1.0, 2.0, 3.0], "X", "yhat", NAMED3)
    assert out.tolist() == [[6.0]]
    assert list(runner.calls[0]) == ["X"]
    assert runner.calls[0]["X"].shape == (1, 3)


@pytest.mark.asyncio
async def test_empty_input():
    runner = FakeRunner()
    with pytest.raises(EmptyInput):
        await invoke(runner, [], "input", "output", FREE)
    assert runner.calls == []


@pytest.mark.asyncio
async def test_named_length_mismatch_never_reaches_runner():
    runner = FakeRunner()
    with pytest.raises(ShapeMismatch, match="Expected 3 features, got 2"):
        await invoke(runner, [1.0, 2.0], "input", "output", NAMED3)
    assert runner.calls == []


@pytest.mark.asyncio
async def test_free_form_accepts_any_length():
    out = await invoke(FakeRunner(), [1.0] * 5, "input", "output", FREE)
    assert out.tolist() == [[5.0]]


@pytest.mark.asyncio
async def test_missing_output():
    runner = FakeRunner(output_name="prob")
    with pytest.raises(MissingOutput, match='"output"'):
        await invoke(runner, [1.0, 2.0, 3.0], "input", "output", NAMED3)
    assert len(runner.calls) == 1


@pytest.mark.asyncio
async def test_runner_failure_propagates_unchanged():
    boom = RuntimeError("[ONNXRuntimeError] invalid input name")
    runner = FakeRunner(fail=boom)
    with pytest.raises(RuntimeError) as exc:
        await invoke(runner, [1.0, 2.0, 3.0], "input", "output", NAMED3)
    assert exc.value is boom
