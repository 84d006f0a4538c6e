import pytest

from sakura.config import Settings
from sakura.services.result import Result

CONFIG_ENV_VARS = [
    "LINE_CHANNEL_ACCESS_TOKEN",
    "LINE_CHANNEL_SECRET",
    "LINE_API_BASE_URL",
    "DEEPSEEK_API_KEY",
    "OPENAI_API_KEY",
    "AI_BASE_URL",
    "AI_MODEL_NAME",
    "COMPLETION_TIMEOUT_SECONDS",
    "MAX_TURNS",
    "PORT",
]


class RecordingDelivery:
    """Delivery double that remembers every send."""

    def __init__(self, fail_for: tuple[str, ...] = ()):
        self.sent = []
        self.fail_for = fail_for

    async def send(self, target, text):
        self.sent.append((target, text))
        if target.user_id in self.fail_for:
            return Result.failure("LINE API error: 500", "delivery_error")
        return Result.success({})


@pytest.fixture
def clean_env(monkeypatch):
    """Remove config variables that would leak into Settings."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings(clean_env):
    def _make(**overrides) -> Settings:
        values = {"line_channel_access_token": "test-token"}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def delivery():
    return RecordingDelivery()


@pytest.fixture
def make_delivery():
    return RecordingDelivery
