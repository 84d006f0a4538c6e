from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from sakura.runtime import RelayRuntime, get_runtime

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def status_text(runtime: RelayRuntime = Depends(get_runtime)):
    if runtime.gateway.ai_enabled:
        return f"Sakura LINE bot is running in AI mode with model: {runtime.model_name} 💕"
    return f"Sakura LINE bot is running in fallback mode (no AI key), model: {runtime.model_name} 💕"


@router.get("/health")
async def health(runtime: RelayRuntime = Depends(get_runtime)):
    return {
        "status": "ok",
        "mode": runtime.mode,
        "model": runtime.model_name,
        "worker": runtime.worker.state.value,
        "queued": len(runtime.queue),
        "users": len(runtime.conversations),
    }
