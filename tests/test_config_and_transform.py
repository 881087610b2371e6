"""
Tests for settings, the transform wrapper and provider selection
"""

import asyncio

import pytest

from doc2slides.ai.prompts import ContentPrompts
from doc2slides.ai.providers import DisabledTransform, OpenAITransform, create_text_transform
from doc2slides.core.config import AppConfig, validate_config
from doc2slides.core.exceptions import TransformError, TransformUnavailableError

from conftest import FakeTransform


def settings(**overrides) -> AppConfig:
    values = {"_env_file": None, "openai_api_key": None, "transform_provider": "auto"}
    values.update(overrides)
    return AppConfig(**values)


class TestAppConfig:

    def test_auto_provider_follows_api_key(self):
        assert settings().effective_transform_provider == "disabled"
        assert settings(openai_api_key="sk-test").effective_transform_provider == "openai"

    def test_explicit_provider(self):
        assert settings(openai_api_key="sk-test", transform_provider="disabled").effective_transform_provider == "disabled"

    def test_upload_limit_in_bytes(self):
        assert settings(max_upload_size_mb=2).max_upload_size_bytes == 2 * 1024 * 1024

    def test_safe_dict_masks_key(self):
        data = settings(openai_api_key="sk-secret").safe_dict()
        assert data["openai_api_key"] == "***"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MAX_CHUNK_TOKENS", "1234")
        monkeypatch.setenv("SLIDES_BACKEND", "mock")
        config = AppConfig(_env_file=None)
        assert config.max_chunk_tokens == 1234
        assert config.slides_backend == "mock"

    def test_defaults_are_valid(self):
        assert validate_config(settings()) == []

    def test_validation_errors(self):
        errors = validate_config(settings(
            max_chunk_tokens=0,
            pdf_batch_size=0,
            temperature=3.0,
            slides_backend="keynote",
        ))
        assert len(errors) == 4

    def test_openai_without_key(self):
        errors = validate_config(settings(transform_provider="openai"))
        assert any("OPENAI_API_KEY" in error for error in errors)


class TestTextTransform:

    @pytest.mark.asyncio
    async def test_output_is_stripped(self):
        transform = FakeTransform(lambda kind, prompt: "  • point  \n")
        assert await transform.transform("prompt", "system", 100) == "• point"

    @pytest.mark.asyncio
    async def test_empty_output_is_an_error(self):
        """Blank output is treated like a failed call"""
        transform = FakeTransform(lambda kind, prompt: "   ")
        with pytest.raises(TransformError):
            await transform.transform("prompt", "system", 100)

    @pytest.mark.asyncio
    async def test_exceptions_are_wrapped(self):
        transform = FakeTransform(lambda kind, prompt: ConnectionError("reset"))
        with pytest.raises(TransformError, match="reset"):
            await transform.transform("prompt", "system", 100)

    @pytest.mark.asyncio
    async def test_timeout(self):
        class Slow(FakeTransform):
            async def chat_completion(self, messages, **kwargs):
                await asyncio.sleep(1)
                return await super().chat_completion(messages, **kwargs)

        with pytest.raises(TransformError, match="timed out"):
            await Slow(timeout=0.01).transform("prompt", "system", 100)

    @pytest.mark.asyncio
    async def test_disabled_transform(self):
        with pytest.raises(TransformUnavailableError):
            await DisabledTransform({"model": "none"}).transform("prompt", "system", 100)


class TestProviderSelection:

    def test_disabled_without_key(self):
        assert isinstance(create_text_transform(settings()), DisabledTransform)

    def test_openai_with_key(self):
        transform = create_text_transform(settings(openai_api_key="sk-test", openai_model="gpt-4o-mini"))
        assert isinstance(transform, OpenAITransform)
        assert transform.model == "gpt-4o-mini"
        assert "api_key" not in transform.get_model_info()["config"]

    def test_think_blocks_removed(self):
        transform = create_text_transform(settings(openai_api_key="sk-test"))
        assert transform._filter_think_content("<think>hmm</think>• answer") == "• answer"


class TestPrompts:

    def test_chunk_prompt_wording(self):
        first = ContentPrompts.get_chunk_prompt("Budget", "text", 0, 3)
        later = ContentPrompts.get_chunk_prompt("Budget", "text", 2, 3)

        assert first.startswith('This is part 1 of 3 from a section titled "Budget". Extract the key points')
        assert "part 3 of 3" in later
        assert "Extract additional key points" in later

    def test_conclusion_prompt_lists_titles(self):
        prompt = ContentPrompts.get_conclusion_prompt("Review", ["One", "Two"], "sample")
        assert '"Review"' in prompt
        assert "One, Two" in prompt
