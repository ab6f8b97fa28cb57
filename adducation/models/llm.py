"""
LLM gateway models for Adducation

Result envelope and provider catalog entries.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Why an LLM operation failed."""

    CONFIGURATION = "configuration"  # No API key, nothing sent
    HTTP = "http"                    # Network failure or non-2xx
    PARSE = "parse"                  # Reply received but every parser failed


class LLMResult(BaseModel):
    """Uniform result of an LLM gateway call."""

    success: bool
    data: Any = None
    error: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def ok(cls, data: Any) -> "LLMResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, error: str) -> "LLMResult":
        return cls(success=False, error=error, error_kind=kind)


class OpenRouterModel(BaseModel):
    """A model offered by the provider."""

    id: str
    name: str
    description: str | None = None
    context_length: int | None = None
    pricing: dict[str, Any] | None = None
    is_free: bool = Field(
        default=False,
        description="Zero prompt price or a free-tier id"
    )
