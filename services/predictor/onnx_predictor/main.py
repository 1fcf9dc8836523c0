import logging
import time
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from . import __version__
from .errors import PredictorError
from .pipeline import PredictorContext, RunnerFactory, default_runner
from .schemas import ErrorResponse, ModelInfo, PredictRequest, PredictResponse
from .settings import Settings

log = logging.getLogger("api")

REQS = Counter("predict_requests_total", "Total predict requests", ["status"])
ERRORS = Counter("predict_errors_total", "Failed predict requests by error code", ["code"])
E2E = Histogram("predict_e2e_latency_ms", "End-to-end predict latency (ms)",
                buckets=(1, 2, 3, 5, 8, 13, 21, 34, 55, 89, 144))
INF = Histogram("predict_inference_latency_ms", "Preprocess + inference latency (ms)",
                buckets=(1, 2, 3, 5, 8, 13, 21, 34, 55, 89))


def _error(status_code: int, code: str, message: str, corr_id: str) -> JSONResponse:
    ERRORS.labels(code).inc()
    REQS.labels("error").inc()
    body = ErrorResponse(error=code, message=message, corr_id=corr_id)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def create_app(settings: Optional[Settings] = None, runner_factory: RunnerFactory = default_runner) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="ONNX Predictor API", version=__version__)
    app.state.predictor = PredictorContext(settings, runner_factory)

    @app.on_event("startup")
    async def _startup():
        await app.state.predictor.start()
        log.info("Ready.")

    @app.on_event("shutdown")
    async def _shutdown():
        await app.state.predictor.stop()

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok" if app.state.predictor.ready else "loading"}

    @app.get("/metrics")
    async def metrics():
        return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/v1/model", response_model=ModelInfo)
    async def model_info():
        ctx: PredictorContext = app.state.predictor
        return ModelInfo(**ctx.describe(), summary=ctx.describe_text())

    @app.post("/v1/predict", response_model=PredictResponse, responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}})
    async def predict(payload: PredictRequest, request: Request):
        ctx: PredictorContext = app.state.predictor
        corr_id = request.headers.get("x-corr-id", str(uuid.uuid4()))
        t0 = time.perf_counter()
        if not ctx.ready:
            return _error(503, "not_ready", "Model is still loading.", corr_id)
        try:
            t_inf = time.perf_counter()
            result = await ctx.predict(csv_row=payload.csv_row, features=payload.features)
            INF.observe((time.perf_counter() - t_inf) * 1000)
        except PredictorError as e:
            log.info(f"corr_id={corr_id} rejected code={e.code} msg={e}")
            return _error(422, e.code, str(e), corr_id)
        except Exception as e:
            log.exception(f"corr_id={corr_id} runner failure")
            return _error(502, "runner_failure", str(e) or type(e).__name__, corr_id)

        e2e_ms = int((time.perf_counter() - t0) * 1000)
        E2E.observe(e2e_ms)
        REQS.labels("done").inc()
        log.debug(f"corr_id={corr_id} result={result} latency_ms={e2e_ms}")
        return PredictResponse(result=result, corr_id=corr_id, latency_ms=e2e_ms)

    return app


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8080)
