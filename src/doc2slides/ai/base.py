"""
Base classes for the text transform capability
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Dict, Any, Optional

from pydantic import BaseModel, Field

from ..core.exceptions import TransformError

logger = logging.getLogger(__name__)


class MessageRole(str, Enum):
    """Message roles for chat completions"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class AIMessage(BaseModel):
    """Chat message"""
    role: MessageRole
    content: str
    name: Optional[str] = None


class AIResponse(BaseModel):
    """Chat completion result"""
    content: str
    model: str
    usage: Dict[str, int] = Field(default_factory=dict)
    finish_reason: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class TextTransform(ABC):
    """
    Rewrites text through a language model

    Callers use transform() only. It applies the configured timeout and
    turns every failure (remote error, timeout, empty output) into
    TransformError, so call sites handle exactly one exception type.
    """

    name = "base"

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.model = config.get("model", "unknown")
        self.timeout = config.get("timeout", 60.0)

    @abstractmethod
    async def chat_completion(self, messages: List[AIMessage], **kwargs) -> AIResponse:
        """Generate a chat completion"""
        pass

    async def transform(self, prompt: str, system_prompt: str, max_tokens: int) -> str:
        """
        Run one prompt through the model

        Args:
            prompt: user message
            system_prompt: system instruction
            max_tokens: output token budget

        Returns:
            stripped, non-empty model output
        """
        messages = [
            AIMessage(role=MessageRole.SYSTEM, content=system_prompt),
            AIMessage(role=MessageRole.USER, content=prompt),
        ]
        try:
            response = await asyncio.wait_for(
                self.chat_completion(messages, max_tokens=max_tokens),
                timeout=self.timeout,
            )
        except TransformError:
            raise
        except asyncio.TimeoutError as e:
            raise TransformError(f"{self.name} transform timed out after {self.timeout}s") from e
        except Exception as e:
            raise TransformError(f"{self.name} transform failed: {e}") from e

        content = (response.content or "").strip()
        if not content:
            raise TransformError(f"{self.name} transform returned empty output")
        return content

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "provider": self.name,
            "config": {k: v for k, v in self.config.items() if "key" not in k.lower()},
        }
