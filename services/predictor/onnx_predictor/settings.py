import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple


def _flag(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


def _names(value: str) -> Tuple[str, ...]:
    return tuple(n.strip() for n in value.split(",") if n.strip())


@dataclass(frozen=True)
class Settings:
    model_url: str = "model.onnx"
    input_name: str = "input"
    output_name: str = "output"
    # Used only when no meta.json is found. Names win over count.
    feature_names: Tuple[str, ...] = field(default_factory=tuple)
    feature_count: int = 0
    meta_filename: str = "meta.json"
    asset_root: str = "."
    runner: str = "onnxruntime"
    triton_url: str = "http://triton:8000"
    triton_model: str = "model"
    triton_model_version: str = "1"
    meta_timeout_s: float = 2.0
    model_load_timeout_s: float = 30.0
    infer_timeout_s: float = 5.0
    csv_lenient: bool = True
    warmup_enabled: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            model_url=env.get("MODEL_URL", "model.onnx"),
            input_name=env.get("INPUT_NAME", "input"),
            output_name=env.get("OUTPUT_NAME", "output"),
            feature_names=_names(env.get("FEATURE_NAMES", "")),
            feature_count=int(env.get("FEATURE_COUNT", "0")),
            meta_filename=env.get("META_FILENAME", "meta.json"),
            asset_root=env.get("ASSET_ROOT", "."),
            runner=env.get("RUNNER", "onnxruntime").lower(),
            triton_url=env.get("TRITON_URL", "http://triton:8000"),
            triton_model=env.get("TRITON_MODEL", "model"),
            triton_model_version=env.get("TRITON_MODEL_VERSION", "1"),
            meta_timeout_s=float(env.get("META_TIMEOUT_S", "2.0")),
            model_load_timeout_s=float(env.get("MODEL_LOAD_TIMEOUT_S", "30.0")),
            infer_timeout_s=float(env.get("INFER_TIMEOUT_S", "5.0")),
            csv_lenient=_flag(env.get("CSV_LENIENT", "true")),
            warmup_enabled=_flag(env.get("WARMUP_ENABLED", "true")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def triton_infer_url(self) -> str:
        return f"{self.triton_url}/v2/models/{self.triton_model}/versions/{self.triton_model_version}/infer"
