from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from api.routes import router
from contextlib import asynccontextmanager
import asyncio
import logging
import time
import sentry_sdk

from config import Settings
from logging_config import setup_logging
from launchpad.pipeline import build_pipeline
from launchpad.processed_store import apply_migrations

settings = Settings.from_env()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Initialize Sentry if DSN is configured
if settings.sentry_dsn:
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        traces_sample_rate=0.1,
        environment=settings.environment,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Tweet-to-Launch starting")

    if settings.database_url:
        try:
            applied = await asyncio.to_thread(apply_migrations, settings.database_url)
            logger.info("Applied %d migrations", applied)
        except Exception as e:
            logger.error("Migration error: %s", e, exc_info=True)
            raise

    pipeline = build_pipeline(settings)
    app.state.pipeline = pipeline

    if settings.monitor_autostart:
        if pipeline.monitor is not None:
            await pipeline.start_monitor()
        else:
            logger.warning("MONITOR_AUTOSTART set but monitor is not configured")

    yield

    await pipeline.shutdown()
    logger.info("Tweet-to-Launch shutting down")


app = FastAPI(
    title="Tweet-to-Launch",
    description="Turn prompts and mentions into pump.fun token launches",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round(time.time() - start, 3)
    logger.info("request | %s %s | %s | %.3fs", request.method, request.url.path, response.status_code, duration)
    return response


app.include_router(router, prefix="/api")


@app.get("/health")
async def health(request: Request):
    pipeline = getattr(request.app.state, "pipeline", None)
    return {
        "status": "ok",
        "service": "tweet-to-launch",
        "wallet_configured": bool(pipeline and pipeline.launcher),
        "monitor": pipeline.monitor_status() if pipeline else None,
    }
