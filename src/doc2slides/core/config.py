"""
Configuration management for doc2slides
"""

import logging
from pathlib import Path
from typing import Optional, Dict, Any, List, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables with error handling
try:
    # 1) Try default behavior (searches from CWD)
    loaded = load_dotenv()
    # 2) If not found, try project root (directory that contains pyproject.toml)
    if not loaded:
        for parent in Path(__file__).resolve().parents:
            if (parent / "pyproject.toml").exists():
                env_path = parent / ".env"
                if env_path.exists():
                    load_dotenv(env_path)
                break
except (PermissionError, FileNotFoundError):
    # Continue with system environment variables only
    pass


class AppConfig(BaseSettings):
    """Application settings"""

    # OpenAI Configuration
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_base_url: Optional[str] = Field(default=None, description="Custom OpenAI-compatible endpoint")
    openai_model: str = Field(default="gpt-4o")
    temperature: float = Field(default=0.7)

    # Provider Selection: auto, openai, disabled
    transform_provider: str = Field(default="auto")

    # Timeouts (seconds)
    transform_timeout: float = Field(default=60.0)
    docx_conversion_timeout: float = Field(default=60.0)

    # Extraction
    pdf_batch_size: int = Field(default=10)
    pdf_batch_delay: float = Field(default=0.1)

    # Enhancement
    max_chunk_tokens: int = Field(default=4000)
    min_section_length: int = Field(default=20)
    max_concurrent_sections: int = Field(default=0, description="0 means unbounded")
    section_max_tokens: int = Field(default=700)
    chunk_max_tokens: int = Field(default=350)
    summary_max_tokens: int = Field(default=700)
    conclusion_max_tokens: int = Field(default=400)
    title_max_tokens: int = Field(default=100)

    # Uploads and output
    max_upload_size_mb: int = Field(default=10)
    upload_dir: str = Field(default="uploads")
    output_dir: str = Field(default="output")
    slides_backend: str = Field(default="pptx")

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    log_ai_requests: bool = Field(default=False)

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore"
    }

    SLIDES_BACKENDS: ClassVar[tuple] = ("pptx", "mock")
    TRANSFORM_PROVIDERS: ClassVar[tuple] = ("auto", "openai", "disabled")
    SENSITIVE_FIELDS: ClassVar[tuple] = ("openai_api_key",)

    @property
    def effective_transform_provider(self) -> str:
        """Resolve 'auto' to the provider that will actually be used"""
        provider = (self.transform_provider or "auto").strip().lower()
        if provider == "auto":
            return "openai" if self.openai_api_key else "disabled"
        return provider

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def get_provider_config(self, provider: Optional[str] = None) -> Dict[str, Any]:
        """Get configuration for the text transform provider"""
        provider = provider or self.effective_transform_provider

        configs = {
            "openai": {
                "api_key": self.openai_api_key,
                "base_url": self.openai_base_url,
                "model": self.openai_model,
                "temperature": self.temperature,
                "timeout": self.transform_timeout,
                "log_requests": self.log_ai_requests,
            },
            "disabled": {
                "model": "none",
                "timeout": self.transform_timeout,
            },
        }

        return configs.get(provider, configs["disabled"])

    def safe_dict(self) -> Dict[str, Any]:
        """All settings with secrets masked"""
        data = self.model_dump()
        for key in self.SENSITIVE_FIELDS:
            if data.get(key):
                data[key] = "***"
        return data


def validate_config(config: AppConfig) -> List[str]:
    """
    Validate settings

    Args:
        config: settings to check

    Returns:
        list of error messages, empty when the configuration is usable
    """
    errors = []

    positive_fields = [
        "transform_timeout",
        "docx_conversion_timeout",
        "max_chunk_tokens",
        "section_max_tokens",
        "chunk_max_tokens",
        "summary_max_tokens",
        "conclusion_max_tokens",
        "title_max_tokens",
        "max_upload_size_mb",
    ]
    for name in positive_fields:
        if getattr(config, name) <= 0:
            errors.append(f"{name} must be positive")

    if config.pdf_batch_size < 1:
        errors.append("pdf_batch_size must be at least 1")
    if config.pdf_batch_delay < 0:
        errors.append("pdf_batch_delay cannot be negative")
    if config.min_section_length < 0:
        errors.append("min_section_length cannot be negative")
    if config.max_concurrent_sections < 0:
        errors.append("max_concurrent_sections cannot be negative (0 means unbounded)")
    if not 0.0 <= config.temperature <= 2.0:
        errors.append("temperature must be between 0.0 and 2.0")

    if config.slides_backend not in AppConfig.SLIDES_BACKENDS:
        errors.append(
            f"unknown slides_backend '{config.slides_backend}', expected one of {', '.join(AppConfig.SLIDES_BACKENDS)}"
        )
    if (config.transform_provider or "").lower() not in AppConfig.TRANSFORM_PROVIDERS:
        errors.append(
            f"unknown transform_provider '{config.transform_provider}', expected one of {', '.join(AppConfig.TRANSFORM_PROVIDERS)}"
        )
    elif config.transform_provider.lower() == "openai" and not config.openai_api_key:
        errors.append("transform_provider is 'openai' but OPENAI_API_KEY is not set")

    if errors:
        logging.getLogger(__name__).debug(f"Configuration errors: {errors}")
    return errors


# Global config instance
app_config = AppConfig()
