from typing import List, Optional

import httpx

from sakura.logging_config import get_logger
from sakura.services.llm.base import LLMProvider, LLMProviderError, LLMResponse

logger = get_logger("llm.openai")


class OpenAIProvider(LLMProvider):
    """OpenAI-compatible chat completions (OpenAI, DeepSeek)."""

    def __init__(
        self,
        api_key: str,
        default_model: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.default_model = default_model
        self.base_url = base_url.rstrip("/")
        self.completions_url = f"{self.base_url}/chat/completions"
        self._transport = transport

    async def generate(
        self,
        messages: List[dict],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        timeout_seconds: Optional[float] = None,
    ) -> LLMResponse:
        """Generate response from the completion endpoint."""

        model = model or self.default_model

        timeout = timeout_seconds if timeout_seconds is not None else 60.0
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            payload = {
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
            logger.debug(f"Completion request: model={model}, messages_count={len(messages)}")

            response = await client.post(
                self.completions_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )

        logger.debug(f"Completion response status: {response.status_code}")

        if response.status_code != 200:
            logger.error(f"Completion error: {response.text[:500]}")
            raise LLMProviderError(f"Completion API error: {response.status_code} - {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as e:
            raise LLMProviderError(f"Completion API returned non-JSON body: {e}") from e

        content = ""
        choices = data.get("choices") if isinstance(data, dict) else None
        if choices:
            message = choices[0].get("message") or {}
            content = message.get("content") or ""
        logger.debug(f"Completion content: {content[:100] if content else 'EMPTY'}")

        return LLMResponse(
            content=content,
            model=data.get("model", model) if isinstance(data, dict) else model,
            usage=data.get("usage") if isinstance(data, dict) else None,
        )
