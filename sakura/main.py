import asyncio

import uvicorn
from fastapi import FastAPI

from sakura.config import settings
from sakura.logging_config import get_logger, setup_logging
from sakura.routers import health, webhook
from sakura.runtime import build_runtime

setup_logging(settings.log_level)

logger = get_logger("main")

SHUTDOWN_DRAIN_TIMEOUT_SECONDS = 10.0

app = FastAPI(
    title="Sakura LINE Bot",
    description="LINE chat-relay bot with AI replies and canned fallback",
    version="0.1.0",
)
app.state.runtime = build_runtime(settings)

app.include_router(health.router)
app.include_router(webhook.router)


@app.on_event("startup")
async def log_startup() -> None:
    runtime = app.state.runtime
    if not runtime.settings.line_channel_secret:
        logger.warning("LINE_CHANNEL_SECRET is not set, webhook signatures are not verified")
    logger.info(
        "Sakura bot started",
        extra={"context": {"mode": runtime.mode, "model": runtime.model_name, "port": runtime.settings.port}},
    )


@app.on_event("shutdown")
async def drain_on_shutdown() -> None:
    worker = app.state.runtime.worker
    try:
        await asyncio.wait_for(worker.wait_idle(), timeout=SHUTDOWN_DRAIN_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(
            "Shutdown with pending reply jobs",
            extra={"context": {"queued": len(app.state.runtime.queue)}},
        )


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
