import base64
import hashlib
import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx

from sakura.logging_config import get_logger
from sakura.services.result import ErrorCode, Result

logger = get_logger("line_service")

LINE_TEXT_LIMIT = 5000


def compute_signature(body: bytes, channel_secret: str) -> str:
    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: bytes, signature: Optional[str], channel_secret: str) -> bool:
    """Check the x-line-signature header against the raw request body."""
    if not signature:
        return False
    expected = compute_signature(body, channel_secret)
    return hmac.compare_digest(expected, signature.strip())


@dataclass(frozen=True)
class DeliveryTarget:
    """Either a one-shot reply token or a persistent LINE user id."""

    reply_token: Optional[str] = None
    user_id: Optional[str] = None

    def __post_init__(self):
        if bool(self.reply_token) == bool(self.user_id):
            raise ValueError("DeliveryTarget needs exactly one of reply_token or user_id")

    @classmethod
    def for_reply(cls, reply_token: str) -> "DeliveryTarget":
        return cls(reply_token=reply_token)

    @classmethod
    def for_user(cls, user_id: str) -> "DeliveryTarget":
        return cls(user_id=user_id)


class Delivery(ABC):
    @abstractmethod
    async def send(self, target: DeliveryTarget, text: str) -> Result[dict]:
        """Send one text message. Never raises for transport failures."""
        pass


class LineService(Delivery):
    """Service for sending messages through the LINE Messaging API."""

    def __init__(
        self,
        channel_access_token: str,
        base_url: str = "https://api.line.me",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.channel_access_token = channel_access_token
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def _make_request(self, path: str, data: dict) -> Result[dict]:
        """Make request to LINE API."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await client.post(
                    url,
                    headers={"Authorization": f"Bearer {self.channel_access_token}"},
                    json=data,
                )
        except httpx.HTTPError as e:
            logger.error(f"LINE API error: {e}")
            return Result.failure(str(e), ErrorCode.DELIVERY_ERROR)

        if response.status_code != 200:
            logger.error(f"LINE API error: status={response.status_code}, body={response.text[:200]}")
            return Result.failure(f"LINE API error: {response.status_code} - {response.text[:200]}", ErrorCode.DELIVERY_ERROR)

        try:
            return Result.success(response.json())
        except ValueError:
            return Result.success({})

    @staticmethod
    def _text_messages(text: str) -> list[dict]:
        return [{"type": "text", "text": text[:LINE_TEXT_LIMIT]}]

    async def reply_message(self, reply_token: str, text: str) -> Result[dict]:
        """Reply with a webhook reply token (single use, short-lived)."""
        data = {"replyToken": reply_token, "messages": self._text_messages(text)}
        return await self._make_request("/v2/bot/message/reply", data)

    async def push_message(self, user_id: str, text: str) -> Result[dict]:
        """Push to a user id (usable any time after the webhook returned)."""
        data = {"to": user_id, "messages": self._text_messages(text)}
        return await self._make_request("/v2/bot/message/push", data)

    async def send(self, target: DeliveryTarget, text: str) -> Result[dict]:
        if target.reply_token:
            return await self.reply_message(target.reply_token, text)
        return await self.push_message(target.user_id, text)
