"""
AI module - text transform capability and prompts
"""

from .base import TextTransform, AIMessage, AIResponse, MessageRole
from .providers import (
    OpenAITransform,
    DisabledTransform,
    TransformFactory,
    create_text_transform,
)
from .prompts import SystemPrompts, ContentPrompts

__all__ = [
    "TextTransform",
    "AIMessage",
    "AIResponse",
    "MessageRole",
    "OpenAITransform",
    "DisabledTransform",
    "TransformFactory",
    "create_text_transform",
    "SystemPrompts",
    "ContentPrompts",
]
