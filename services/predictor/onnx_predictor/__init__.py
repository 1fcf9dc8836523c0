"""In-process client for ONNX numeric prediction models."""

__version__ = "0.1.0"
