from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class PredictRequest(BaseModel):
    csv_row: Optional[str] = Field(None, max_length=65536)
    features: Optional[Dict[str, float]] = None


class PredictResponse(BaseModel):
    status: str = "done"
    result: str
    corr_id: str
    latency_ms: int


class ErrorResponse(BaseModel):
    status: str = "error"
    error: str
    message: str
    corr_id: str


class ModelInfo(BaseModel):
    model_url: str
    input_name: str
    output_name: str
    runner: str
    schema_source: str
    feature_count: int
    feature_names: List[str]
    scaling: str
    model_label: Optional[str] = None
    ready: bool
    summary: str
