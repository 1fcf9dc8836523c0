"""Model runner backends.

A runner executes the model given named input tensors and returns named output
tensors. It is created and loaded once per process and then only ``run``.
"""
import asyncio
import logging
from typing import Dict, List, Mapping, Optional, Protocol, Sequence

import httpx
import numpy as np

from .descriptor import is_url

log = logging.getLogger("predictor.runners")

_DTYPES = {"FP32": np.float32, "FP64": np.float64, "INT64": np.int64, "INT32": np.int32, "BOOL": np.bool_}


class ModelRunner(Protocol):
    async def load(self) -> None: ...

    async def run(self, feeds: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]: ...

    async def close(self) -> None: ...

    @property
    def input_names(self) -> List[str]: ...

    @property
    def output_names(self) -> List[str]: ...


class OnnxRuntimeRunner:
    """In-process onnxruntime session."""

    def __init__(self, model_location: str, providers: Sequence[str] = ("CPUExecutionProvider",), timeout_s: float = 30.0):
        self.model_location = model_location
        self.providers = list(providers)
        self.timeout_s = timeout_s
        self._session = None

    async def _read_model(self):
        if not is_url(self.model_location):
            return self.model_location
        async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s)) as client:
            r = await client.get(self.model_location)
            r.raise_for_status()
            return r.content

    async def load(self) -> None:
        import onnxruntime as ort

        model = await self._read_model()
        self._session = await asyncio.to_thread(ort.InferenceSession, model, providers=self.providers)
        log.info(f"onnxruntime session ready inputs={self.input_names} outputs={self.output_names}")

    async def run(self, feeds: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        if self._session is None:
            raise RuntimeError("onnxruntime session is not loaded")
        outputs = await asyncio.to_thread(self._session.run, None, dict(feeds))
        return dict(zip(self.output_names, outputs))

    async def close(self) -> None:
        self._session = None

    @property
    def input_names(self) -> List[str]:
        return [i.name for i in self._session.get_inputs()] if self._session else []

    @property
    def output_names(self) -> List[str]:
        return [o.name for o in self._session.get_outputs()] if self._session else []


class TritonRunner:
    """Remote model behind a KServe v2 (Triton) HTTP endpoint."""

    def __init__(self, infer_url: str, timeout: Optional[httpx.Timeout] = None, client: Optional[httpx.AsyncClient] = None):
        self.infer_url = infer_url
        self.timeout = timeout or httpx.Timeout(connect=0.3, read=2.0, write=0.5, pool=0.5)
        self._client = client
        self._outputs: List[str] = []
        self._inputs: List[str] = []

    @property
    def model_url(self) -> str:
        return self.infer_url.rsplit("/infer", 1)[0]

    async def load(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        r = await self._client.get(self.model_url)
        r.raise_for_status()
        meta = r.json()
        self._inputs = [i["name"] for i in meta.get("inputs", [])]
        self._outputs = [o["name"] for o in meta.get("outputs", [])]
        log.info(f"Triton model ready at {self.model_url} inputs={self._inputs} outputs={self._outputs}")

    async def run(self, feeds: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        infer_req = {
            "inputs": [
                {"name": name, "shape": list(arr.shape), "datatype": "FP32", "data": arr.astype(np.float32).tolist()}
                for name, arr in feeds.items()
            ],
        }
        r = await self._client.post(self.infer_url, json=infer_req)
        r.raise_for_status()
        out: Dict[str, np.ndarray] = {}
        for o in r.json().get("outputs", []):
            data = o.get("data")
            if data is None:
                raise RuntimeError(f"Triton JSON missing 'data' for output {o.get('name')}")
            arr = np.asarray(data, dtype=_DTYPES.get(o.get("datatype", "FP32"), np.float32))
            shape = o.get("shape")
            out[o["name"]] = arr.reshape(shape) if shape else arr
        return out

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def input_names(self) -> List[str]:
        return self._inputs

    @property
    def output_names(self) -> List[str]:
        return self._outputs
