"""Startup resolution and the per-request prediction pipeline.

``PredictorContext`` owns everything resolved once at startup (descriptor,
feature schema, normalization, runner handle) and is handed to each request.
Predictions are serialized on the context lock, so a second predict waits for
the one in flight and the runner is never reloaded underneath it.
"""
import asyncio
import logging
from typing import Callable, List, Mapping, Optional

from .decoding import decode_result
from .descriptor import ModelDescriptor, resolve_descriptor, resolve_location
from .features import FeatureSchema, resolve_feature_schema
from .inference import check_shape, invoke
from .preprocessing import NormalizationParams, normalize
from .request import row_values
from .runners import ModelRunner, OnnxRuntimeRunner, TritonRunner
from .settings import Settings

log = logging.getLogger("predictor.pipeline")

RunnerFactory = Callable[[Settings], ModelRunner]


def default_runner(settings: Settings) -> ModelRunner:
    if settings.runner == "triton":
        return TritonRunner(settings.triton_infer_url)
    if settings.runner == "onnxruntime":
        return OnnxRuntimeRunner(
            resolve_location(settings.model_url, settings.asset_root),
            timeout_s=settings.model_load_timeout_s,
        )
    raise ValueError(f"Unknown RUNNER {settings.runner!r} (expected onnxruntime or triton)")


class PredictorContext:
    def __init__(self, settings: Settings, runner_factory: RunnerFactory = default_runner):
        self.settings = settings
        self._runner_factory = runner_factory
        self._lock = asyncio.Lock()
        self.descriptor: Optional[ModelDescriptor] = None
        self.schema: FeatureSchema = resolve_feature_schema(None, settings.feature_names, settings.feature_count)
        self.scaler: Optional[NormalizationParams] = None
        self.runner: Optional[ModelRunner] = None

    @property
    def ready(self) -> bool:
        return self.runner is not None

    async def start(self) -> None:
        async with self._lock:
            if self.runner is not None:
                return
            s = self.settings
            try:
                # two candidates, each bounded by the http timeout
                self.descriptor = await asyncio.wait_for(
                    resolve_descriptor(s.model_url, s.meta_filename, s.asset_root, s.meta_timeout_s),
                    timeout=s.meta_timeout_s * 2 + 1,
                )
            except asyncio.TimeoutError:
                log.warning("Descriptor lookup timed out, using static configuration")
                self.descriptor = None
            self.schema = resolve_feature_schema(self.descriptor, s.feature_names, s.feature_count)
            self.scaler = NormalizationParams.from_descriptor(self.descriptor)
            log.info(f"Feature schema from {self.schema.source.value}: {len(self.schema)} feature(s)")

            runner = self._runner_factory(s)
            await asyncio.wait_for(runner.load(), timeout=s.model_load_timeout_s)
            self.runner = runner
            log.info("Model loaded")
        if s.warmup_enabled and self.schema.named:
            try:
                await self.predict(features={})
                log.info("Warmup succeeded")
            except Exception:
                log.warning("Warmup failed (continuing)")

    async def stop(self) -> None:
        async with self._lock:
            if self.runner is not None:
                await self.runner.close()
                self.runner = None

    async def predict(self, csv_row: Optional[str] = None, features: Optional[Mapping[str, float]] = None) -> str:
        """Run one prediction and return the decoded display string.

        Raises ``PredictorError`` subclasses for request problems; anything
        raised by the runner propagates unchanged.
        """
        s = self.settings
        row = row_values(self.schema, csv_row, features, lenient=s.csv_lenient)
        async with self._lock:
            if self.runner is None:
                raise RuntimeError("Model is not loaded yet")
            check_shape(row, self.schema)
            scaled = normalize(row, self.scaler)
            out = await asyncio.wait_for(
                invoke(self.runner, scaled, s.input_name, s.output_name, self.schema),
                timeout=s.infer_timeout_s,
            )
        return decode_result(out)

    def describe(self) -> Mapping[str, object]:
        """Configuration summary: model, io names, features, scaling, label."""
        s = self.settings
        return {
            "model_url": s.model_url,
            "input_name": s.input_name,
            "output_name": s.output_name,
            "runner": s.runner,
            "schema_source": self.schema.source.value,
            "feature_count": len(self.schema),
            "feature_names": list(self.schema.names),
            "scaling": "z-score (mean/scale from meta.json)" if self.scaler else "none",
            "model_label": self.descriptor.best_model_name if self.descriptor else None,
            "ready": self.ready,
        }

    def describe_text(self) -> str:
        info = self.describe()
        feats = (
            f"Features ({info['feature_count']}): {', '.join(info['feature_names'])}"
            if info["feature_count"]
            else "Features: (free-form csv_row only)"
        )
        lines: List[str] = [
            f"Model file: {info['model_url']}",
            f"Input name: {info['input_name']}\nOutput name: {info['output_name']}",
            feats,
            "Scaling: z-score (mean/scale from meta.json)" if self.scaler else "Scaling: none (raw values passed to model)",
        ]
        if info["model_label"]:
            lines.append(f"Model label: {info['model_label']}")
        return "\n".join(lines)
