import json

import numpy as np
import pytest


class FakeRunner:
    """Stands in for onnxruntime: echoes the row sum under ``output``."""

    def __init__(self, output_name="output", fail=None, empty=False):
        self.output_name = output_name
        self.fail = fail
        self.empty = empty
        self.calls = []
        self.loads = 0
        self.closed = False

    async def load(self):
        self.loads += 1

    async def run(self, feeds):
        self.calls.append({k: v.copy() for k, v in feeds.items()})
        if self.fail is not None:
            raise self.fail
        (tensor,) = feeds.values()
        if self.empty:
            return {self.output_name: np.zeros((1, 0), dtype=np.float32)}
        return {self.output_name: tensor.sum(axis=1, keepdims=True)}

    async def close(self):
        self.closed = True

    @property
    def input_names(self):
        return ["input"]

    @property
    def output_names(self):
        return [self.output_name]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def write_meta(tmp_path):
    def _write(meta, rel="meta.json"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(meta if isinstance(meta, str) else json.dumps(meta), encoding="utf-8")
        return path
    return _write
