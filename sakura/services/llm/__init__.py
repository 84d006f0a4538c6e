from sakura.services.llm.base import LLMProvider, LLMProviderError, LLMResponse
from sakura.services.llm.openai_provider import OpenAIProvider

__all__ = ["LLMProvider", "LLMProviderError", "LLMResponse", "OpenAIProvider"]
