from sakura.schemas.line import LineEvent, LineMessage, LineSource, LineWebhookRequest

__all__ = ["LineEvent", "LineMessage", "LineSource", "LineWebhookRequest"]
