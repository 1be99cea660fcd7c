import time
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from relay import __version__
from relay.config import settings
from relay.logging_config import get_logger, setup_logging
from relay.routers import webhook
from relay.services.pipeline_service import create_pipeline

setup_logging(settings.log_level)

logger = get_logger("main")

app = FastAPI(
    title="LINE Dialogflow Relay",
    description="Relays LINE chat messages to a Dialogflow agent",
    version=__version__,
)

app.include_router(webhook.router)

_started_at = time.monotonic()


def check_environment_variables() -> list[str]:
    missing = settings.missing_env_vars()
    if missing:
        logger.warning(
            "Missing environment variables, check your .env file",
            extra={"context": {"missing": missing}},
        )
    else:
        logger.info("All environment variables are set")
    return missing


@app.on_event("startup")
async def startup() -> None:
    app.state.pipeline = create_pipeline(settings)
    logger.info(
        "LINE Dialogflow relay started",
        extra={
            "context": {
                "port": settings.port,
                "webhook_url": f"http://localhost:{settings.port}/webhook",
                "health_url": f"http://localhost:{settings.port}/health",
                "nlu_ready": app.state.pipeline.gateway.ready,
                "indicator_mode": app.state.pipeline.indicator.mode.value,
            }
        },
    )
    check_environment_variables()


@app.on_event("shutdown")
async def shutdown() -> None:
    pipeline = getattr(app.state, "pipeline", None)
    if pipeline is not None:
        await pipeline.indicator.aclose()
        await pipeline.line.close()


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Something went wrong!", "message": str(exc)},
    )


@app.get("/")
async def root():
    return {
        "status": "LINE Dialogflow relay is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
    }


@app.get("/health")
async def health():
    pipeline = getattr(app.state, "pipeline", None)
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "nlu_ready": bool(pipeline and pipeline.gateway.ready),
    }
