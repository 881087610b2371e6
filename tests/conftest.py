"""
Shared fixtures: isolated settings and a scripted text transform
"""

from typing import Callable, List, Optional, Tuple

import pytest

from doc2slides.ai.base import AIMessage, AIResponse, TextTransform
from doc2slides.ai.prompts import SystemPrompts
from doc2slides.core.config import AppConfig
from doc2slides.core.exceptions import TransformError
from doc2slides.services.progress_tracker import ProgressTracker

SECTION = "section"
CHUNK = "chunk"
SUMMARY = "summary"
CONCLUSION = "conclusion"
SUBTITLE = "subtitle"

_KINDS = {
    SystemPrompts.get_section_system_prompt(): SECTION,
    SystemPrompts.get_chunk_system_prompt(): CHUNK,
    SystemPrompts.get_summary_system_prompt(): SUMMARY,
    SystemPrompts.get_conclusion_system_prompt(): CONCLUSION,
    SystemPrompts.get_subtitle_system_prompt(): SUBTITLE,
}


class FakeTransform(TextTransform):
    """
    Answers by call kind; a responder returning an exception instance raises it

    The responder receives (kind, prompt) and returns the reply text.
    """

    name = "fake"

    def __init__(self, responder: Optional[Callable[[str, str], object]] = None, timeout: float = 5.0):
        super().__init__({"model": "fake-model", "timeout": timeout})
        self.responder = responder or (lambda kind, prompt: f"• {kind} reply")
        self.calls: List[Tuple[str, str]] = []

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.calls]

    async def chat_completion(self, messages: List[AIMessage], **kwargs) -> AIResponse:
        kind = _KINDS.get(messages[0].content, "unknown")
        prompt = messages[1].content
        self.calls.append((kind, prompt))
        reply = self.responder(kind, prompt)
        if isinstance(reply, BaseException):
            raise reply
        return AIResponse(content=str(reply), model=self.model)


def failing(kind: str, prompt: str):
    return TransformError("model unavailable")


@pytest.fixture
def config(tmp_path) -> AppConfig:
    """Settings detached from the environment, writing under tmp_path"""
    return AppConfig(
        _env_file=None,
        openai_api_key=None,
        transform_provider="disabled",
        upload_dir=str(tmp_path / "uploads"),
        output_dir=str(tmp_path / "output"),
        slides_backend="mock",
        pdf_batch_delay=0.0,
        max_chunk_tokens=4000,
    )


@pytest.fixture
def tracker() -> ProgressTracker:
    return ProgressTracker()


@pytest.fixture
def fake_transform() -> FakeTransform:
    return FakeTransform()
