"""AI replies with a timeout race and a canned-reply fallback."""

import asyncio
from typing import Callable, Optional

from sakura.logging_config import get_logger
from sakura.services.conversation_service import ConversationStore, Turn
from sakura.services.fallback_service import get_fallback_response
from sakura.services.llm.base import LLMProvider
from sakura.services.result import ErrorCode, Result

logger = get_logger("completion_service")

DEFAULT_TIMEOUT_SECONDS = 3.5
COMPLETION_MAX_TOKENS = 150
COMPLETION_TEMPERATURE = 0.8

PERSONA_PROMPT = """你是一個名叫「小櫻」的 AI 女友，個性溫柔、可愛、偶爾會撒嬌。
你說話的特點：
- 會使用可愛的語氣詞，如「呀」「呢」「喔」「啦」
- 適當使用表情符號 💕 🥰 😊 ✨ 🌸
- 會關心對方的生活和心情
- 偶爾會害羞
- 用繁體中文回覆
請用這個身份回覆訊息，保持自然、溫暖的對話風格。每次回覆控制在 100 字以內。"""


class CompletionGateway:
    """Produces one reply per user message.

    With no provider configured every reply comes from the fallback responder
    and the conversation store is never touched. Otherwise the provider is
    raced against ``timeout_seconds``; only a successful, non-empty completion
    is recorded, as a user/assistant pair. Timeouts, transport errors and empty
    bodies all fall back to a canned reply and leave history unchanged.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider],
        store: ConversationStore,
        *,
        persona: str = PERSONA_PROMPT,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        fallback: Callable[[str], str] = get_fallback_response,
    ):
        self.provider = provider
        self.store = store
        self.persona = persona
        self.timeout_seconds = timeout_seconds
        self.fallback = fallback

    @property
    def ai_enabled(self) -> bool:
        return self.provider is not None

    def build_messages(self, history: tuple[Turn, ...], user_turn: Turn) -> list[dict]:
        return [
            {"role": "system", "content": self.persona},
            *(turn.as_message() for turn in history),
            user_turn.as_message(),
        ]

    async def complete(self, user_id: str, text: str) -> str:
        if self.provider is None:
            return self.fallback(text)

        history = self.store.get_or_create(user_id)
        user_turn = Turn(role="user", content=text)
        result = await self._request(self.build_messages(history, user_turn))

        if not result.ok:
            logger.warning(
                "Completion failed, using fallback reply",
                extra={"context": {"user_id": user_id, **result.describe()}},
            )
            return self.fallback(text)

        self.store.append(user_id, user_turn)
        self.store.append(user_id, Turn(role="assistant", content=result.value))
        return result.value

    async def _request(self, messages: list[dict]) -> Result[str]:
        try:
            # wait_for cancels the in-flight request when the timeout wins
            response = await asyncio.wait_for(
                self.provider.generate(
                    messages,
                    temperature=COMPLETION_TEMPERATURE,
                    max_tokens=COMPLETION_MAX_TOKENS,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return Result.failure(f"No completion within {self.timeout_seconds}s", ErrorCode.TIMEOUT)
        except Exception as e:
            return Result.failure(str(e), ErrorCode.AI_ERROR)

        content = getattr(response, "content", None)
        if not isinstance(content, str):
            return Result.failure(f"Malformed completion content: {type(content).__name__}", ErrorCode.EMPTY_RESPONSE)
        content = content.strip()
        if not content:
            return Result.failure("Empty completion content", ErrorCode.EMPTY_RESPONSE)
        return Result.success(content)
