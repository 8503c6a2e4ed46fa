"""Pipeline configuration with environment variable loading.

Pydantic-based configuration for the stream client and the markdown
structurer. Values fall back to environment variables, which may be
supplied through a .env file.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


class PipelineConfig(BaseModel):
    """Configuration for decoding, structuring and fetching streams.

    Attributes:
        api_base_url: Base URL of the stream producer.
        request_timeout: HTTP timeout in seconds for streaming requests.
        paragraph_max_chars: Paragraphs longer than this are split on
            sentence boundaries.
        intro_min_length: Intro lines must be longer than this.
        intro_max_length: Intro lines must be shorter than this.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("CHATSTREAM_API_BASE_URL", "http://localhost:8000"),
        description="Base URL of the stream producer",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("CHATSTREAM_REQUEST_TIMEOUT", "120.0")),
        gt=0.0,
        description="HTTP timeout in seconds",
    )
    paragraph_max_chars: int = Field(
        default_factory=lambda: int(os.getenv("CHATSTREAM_PARAGRAPH_MAX_CHARS", "500")),
        ge=40,
        le=10000,
        description="Maximum characters per rendered paragraph",
    )
    intro_min_length: int = Field(
        default=10,
        ge=0,
        description="Exclusive lower length bound for intro lines",
    )
    intro_max_length: int = Field(
        default=100,
        ge=1,
        description="Exclusive upper length bound for intro lines",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base_url must start with http:// or https://")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_intro_bounds(self) -> "PipelineConfig":
        if self.intro_min_length >= self.intro_max_length:
            raise ValueError("intro_min_length must be smaller than intro_max_length")
        return self


def get_config() -> PipelineConfig:
    """Create pipeline configuration from environment.

    Returns:
        Configured PipelineConfig instance.

    Raises:
        ValueError: If an environment value is out of range.
    """
    return PipelineConfig()
