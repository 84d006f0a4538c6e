from sakura.services.completion_service import CompletionGateway
from sakura.services.conversation_service import ConversationStore, Turn
from sakura.services.fallback_service import get_fallback_response
from sakura.services.job_queue import Job, JobQueue
from sakura.services.line_service import Delivery, DeliveryTarget, LineService
from sakura.services.worker import ReplyWorker
from sakura.services.worker_state import InvalidTransitionError, WorkerState

__all__ = [
    "CompletionGateway",
    "ConversationStore",
    "Delivery",
    "DeliveryTarget",
    "InvalidTransitionError",
    "Job",
    "JobQueue",
    "LineService",
    "ReplyWorker",
    "Turn",
    "WorkerState",
    "get_fallback_response",
]
