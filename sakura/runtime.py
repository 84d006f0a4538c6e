from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from sakura.config import Settings
from sakura.services.completion_service import CompletionGateway
from sakura.services.conversation_service import ConversationStore
from sakura.services.job_queue import JobQueue
from sakura.services.line_service import Delivery, LineService
from sakura.services.llm import LLMProvider, OpenAIProvider
from sakura.services.worker import ReplyWorker


@dataclass
class RelayRuntime:
    """Process-wide pipeline state, built once and shared by reference."""

    settings: Settings
    queue: JobQueue
    conversations: ConversationStore
    gateway: CompletionGateway
    delivery: Delivery
    worker: ReplyWorker

    @property
    def mode(self) -> str:
        return "ai" if self.gateway.ai_enabled else "fallback"

    @property
    def model_name(self) -> str:
        return self.settings.model_name


def build_provider(settings: Settings) -> Optional[LLMProvider]:
    api_key = settings.completion_api_key
    if not api_key:
        return None
    return OpenAIProvider(
        api_key=api_key,
        default_model=settings.model_name,
        base_url=settings.completion_base_url,
    )


def build_runtime(
    settings: Settings,
    *,
    provider: Optional[LLMProvider] = None,
    delivery: Optional[Delivery] = None,
) -> RelayRuntime:
    queue = JobQueue()
    conversations = ConversationStore(max_turns=settings.max_turns)
    gateway = CompletionGateway(
        provider if provider is not None else build_provider(settings),
        conversations,
        timeout_seconds=settings.completion_timeout_seconds,
    )
    if delivery is None:
        delivery = LineService(settings.line_channel_access_token, base_url=settings.line_api_base_url)
    worker = ReplyWorker(queue, gateway, delivery)
    return RelayRuntime(
        settings=settings,
        queue=queue,
        conversations=conversations,
        gateway=gateway,
        delivery=delivery,
        worker=worker,
    )


def get_runtime(request: Request) -> RelayRuntime:
    return request.app.state.runtime
