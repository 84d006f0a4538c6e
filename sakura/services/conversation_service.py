"""In-memory, per-user bounded conversation history."""

from collections import deque
from dataclasses import dataclass
from typing import Literal

DEFAULT_MAX_TURNS = 10

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class Turn:
    role: Role
    content: str

    def as_message(self) -> dict:
        return {"role": self.role, "content": self.content}


class ConversationStore:
    """Sliding window of the last ``max_turns`` turns per user.

    Entries are created on first contact and live for the whole process.
    Callers must serialize mutations per user; the single reply worker does.
    """

    def __init__(self, max_turns: int = DEFAULT_MAX_TURNS):
        if max_turns < 1:
            raise ValueError(f"max_turns must be >= 1, got {max_turns}")
        self.max_turns = max_turns
        self._histories: dict[str, deque[Turn]] = {}

    def _history(self, user_id: str) -> deque[Turn]:
        history = self._histories.get(user_id)
        if history is None:
            history = deque(maxlen=self.max_turns)
            self._histories[user_id] = history
        return history

    def get_or_create(self, user_id: str) -> tuple[Turn, ...]:
        return tuple(self._history(user_id))

    def get(self, user_id: str) -> tuple[Turn, ...]:
        return tuple(self._histories.get(user_id, ()))

    def append(self, user_id: str, turn: Turn) -> None:
        # deque(maxlen) drops from the left once full
        self._history(user_id).append(turn)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._histories

    def __len__(self) -> int:
        return len(self._histories)
