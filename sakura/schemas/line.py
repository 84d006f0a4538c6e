from typing import Any, Optional

from pydantic import BaseModel


class LineMessage(BaseModel):
    type: str
    id: Optional[str] = None
    text: Optional[str] = None


class LineSource(BaseModel):
    type: Optional[str] = None  # user, group, room
    userId: Optional[str] = None
    groupId: Optional[str] = None
    roomId: Optional[str] = None


class LineEvent(BaseModel):
    type: str
    message: Optional[LineMessage] = None
    source: Optional[LineSource] = None
    replyToken: Optional[str] = None
    timestamp: Optional[int] = None

    def is_text_from_user(self) -> bool:
        return (
            self.type == "message"
            and self.message is not None
            and self.message.type == "text"
            and self.message.text is not None
            and self.source is not None
            and bool(self.source.userId)
        )


class LineWebhookRequest(BaseModel):
    destination: Optional[str] = None
    # Events stay raw so one malformed event does not reject the batch.
    events: list[Any] = []
