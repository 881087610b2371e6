"""
Text transform implementations and their factory
"""

import logging
import re
from typing import List, Dict, Any, Optional, Type

import openai

from .base import TextTransform, AIMessage, AIResponse
from ..core.config import AppConfig, app_config
from ..core.exceptions import TransformUnavailableError

logger = logging.getLogger(__name__)

THINK_BLOCK = re.compile(r"<think[\s\S]*?</think>", re.IGNORECASE)


class OpenAITransform(TextTransform):
    """OpenAI (or OpenAI-compatible) chat completions"""

    name = "openai"

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.temperature = config.get("temperature", 0.7)
        self.log_requests = config.get("log_requests", False)
        self.client = openai.AsyncOpenAI(
            api_key=config.get("api_key"),
            base_url=config.get("base_url"),
        )

    def _filter_think_content(self, content: Optional[str]) -> str:
        """Drop <think>...</think> reasoning blocks some models emit"""
        if not content:
            return ""
        return THINK_BLOCK.sub("", content)

    async def chat_completion(self, messages: List[AIMessage], **kwargs) -> AIResponse:
        openai_messages = [{"role": m.role.value, "content": m.content} for m in messages]

        if self.log_requests:
            for m in messages:
                logger.debug(f"[{m.role.value}] {m.content}")

        try:
            response = await self.client.chat.completions.create(
                model=kwargs.get("model", self.model),
                messages=openai_messages,
                max_tokens=kwargs.get("max_tokens"),
                temperature=kwargs.get("temperature", self.temperature),
            )
        except Exception as e:
            error_msg = str(e)
            if "timeout" in error_msg.lower():
                logger.error(f"OpenAI API timeout error: {error_msg}")
            elif "rate limit" in error_msg.lower():
                logger.error(f"OpenAI API rate limit error: {error_msg}")
            else:
                logger.error(f"OpenAI API error: {error_msg}")
            raise

        choice = response.choices[0]
        usage = {}
        if response.usage is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return AIResponse(
            content=self._filter_think_content(choice.message.content),
            model=response.model,
            usage=usage,
            finish_reason=choice.finish_reason,
            metadata={"provider": "openai"},
        )


class DisabledTransform(TextTransform):
    """Stand-in used when no model is configured; every call is refused"""

    name = "disabled"

    async def chat_completion(self, messages: List[AIMessage], **kwargs) -> AIResponse:
        raise TransformUnavailableError("no text transform configured (set OPENAI_API_KEY to enable enhancement)")


class TransformFactory:
    """Factory for text transforms"""

    _providers: Dict[str, Type[TextTransform]] = {
        "openai": OpenAITransform,
        "disabled": DisabledTransform,
    }

    @classmethod
    def create_transform(cls, provider_name: str, config: Optional[Dict[str, Any]] = None) -> TextTransform:
        if provider_name not in cls._providers:
            raise ValueError(f"Unknown transform provider: {provider_name}")
        if config is None:
            config = app_config.get_provider_config(provider_name)
        return cls._providers[provider_name](config)


def create_text_transform(config: Optional[AppConfig] = None) -> TextTransform:
    """Select and build the transform for the given settings"""
    config = config or app_config
    provider_name = config.effective_transform_provider
    if provider_name not in TransformFactory._providers:
        logger.warning(f"Unknown transform provider '{provider_name}', enhancement disabled")
        provider_name = "disabled"

    transform = TransformFactory.create_transform(provider_name, config.get_provider_config(provider_name))
    logger.info(f"Text transform: {transform.name} (model: {transform.model})")
    return transform

