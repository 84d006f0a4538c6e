from typing import Optional

from pydantic_settings import BaseSettings

DEEPSEEK_BASE_URL = "https://api.deepseek.com"
OPENAI_BASE_URL = "https://api.openai.com/v1"
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
OPENAI_DEFAULT_MODEL = "gpt-3.5-turbo"


class Settings(BaseSettings):
    line_channel_access_token: str = ""
    line_channel_secret: str = ""
    line_api_base_url: str = "https://api.line.me"

    deepseek_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    ai_base_url: Optional[str] = None
    ai_model_name: Optional[str] = None

    completion_timeout_seconds: float = 3.5
    max_turns: int = 10

    log_level: str = "INFO"
    port: int = 3000

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def use_deepseek(self) -> bool:
        return bool(self.deepseek_api_key)

    @property
    def completion_api_key(self) -> Optional[str]:
        """DeepSeek key wins over OpenAI key; None means fallback-only mode."""
        return self.deepseek_api_key or self.openai_api_key or None

    @property
    def ai_enabled(self) -> bool:
        return self.completion_api_key is not None

    @property
    def completion_base_url(self) -> str:
        if self.ai_base_url:
            return self.ai_base_url.rstrip("/")
        return DEEPSEEK_BASE_URL if self.use_deepseek else OPENAI_BASE_URL

    @property
    def model_name(self) -> str:
        if self.ai_model_name:
            return self.ai_model_name
        return DEEPSEEK_DEFAULT_MODEL if self.use_deepseek else OPENAI_DEFAULT_MODEL


settings = Settings()
