import json
import sys
from pathlib import Path
import torch, torch.nn as nn

N_FEATURES = 4


class TinyNet(nn.Module):
    def __init__(self):
        super().__init__()
        self.lin = nn.Linear(N_FEATURES, 1)

    def forward(self, x):
        return self.lin(x)


OUT = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).resolve().parents[1] / "artifacts"
OUT.mkdir(parents=True, exist_ok=True)

torch.manual_seed(1234)
model = TinyNet().eval()
dummy = torch.randn(1, N_FEATURES)
onnx_path = OUT / "model.onnx"

torch.onnx.export(
    model, dummy, onnx_path.as_posix(),
    input_names=["input"], output_names=["output"],
    opset_version=13, dynamic_axes={"input": {0: "batch"}, "output": {0: "batch"}}
)
print(f"Wrote {onnx_path}")

meta = {
    "feature_names": [f"x{i}" for i in range(N_FEATURES)],
    "scaler_mean": [0.0] * N_FEATURES,
    "scaler_scale": [1.0] * N_FEATURES,
    "best_model_name": "tinynet-linear",
}
meta_path = OUT / "meta.json"
meta_path.write_text(json.dumps(meta, indent=2), encoding="utf-8")
print(f"Wrote {meta_path}")
