import json
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError

from sakura.logging_config import get_logger
from sakura.runtime import RelayRuntime, get_runtime
from sakura.schemas.line import LineEvent, LineWebhookRequest
from sakura.services.job_queue import Job
from sakura.services.line_service import verify_signature

logger = get_logger("webhook")

router = APIRouter()


def parse_line_payload(raw: bytes) -> Optional[LineWebhookRequest]:
    """
    Parse a LINE webhook body with tolerant decoding.
    Returns None when the body is not a usable payload.
    """
    try:
        data = json.loads(raw.decode("utf-8", errors="replace"))
    except ValueError as e:
        logger.warning(f"Webhook body is not JSON: {e}")
        return None

    try:
        return LineWebhookRequest.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Webhook body has unexpected shape: {e.error_count()} errors")
        return None


def extract_jobs(payload: LineWebhookRequest) -> list[Job]:
    """Build one job per text message from a known user; everything else is dropped."""
    jobs = []
    for raw_event in payload.events:
        try:
            event = LineEvent.model_validate(raw_event)
        except ValidationError:
            logger.debug("Skipping malformed event")
            continue
        if not event.is_text_from_user():
            continue
        jobs.append(Job(user_id=event.source.userId, text=event.message.text))
    return jobs


def _check_signature(request: Request, body: bytes, channel_secret: str) -> None:
    if not channel_secret:
        return
    if not verify_signature(body, request.headers.get("x-line-signature"), channel_secret):
        logger.warning("Rejected webhook with invalid signature")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")


@router.post("/webhook")
async def handle_webhook(request: Request, runtime: RelayRuntime = Depends(get_runtime)):
    """
    Accept LINE events and acknowledge immediately.
    Replies are generated and pushed later by the worker; the platform always
    gets a 200 so it never redelivers (and duplicates) an event.
    """
    body = await request.body()
    _check_signature(request, body, runtime.settings.line_channel_secret)

    try:
        payload = parse_line_payload(body)
        jobs = extract_jobs(payload) if payload is not None else []
    except Exception:
        logger.error("Webhook parsing failed", exc_info=True)
        jobs = []

    for job in jobs:
        try:
            runtime.worker.enqueue(job)
        except Exception:
            logger.error("Failed to enqueue reply job", exc_info=True, extra={"context": {"user_id": job.user_id}})

    if jobs:
        logger.info("Webhook accepted", extra={"context": {"jobs": len(jobs)}})
    return Response(status_code=status.HTTP_200_OK)
