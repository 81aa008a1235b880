"""Session data types: uploaded documents, chat messages and generation settings."""

import time
import uuid
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from config.env_var import (
    DEFAULT_TEMPERATURE,
    DEFAULT_MAX_OUTPUT_TOKENS,
    MIN_TEMPERATURE,
    MAX_TEMPERATURE,
    MIN_OUTPUT_TOKENS,
    MAX_OUTPUT_TOKENS,
)
from utils.token_utils import estimate_token_count


def _new_id() -> str:
    return uuid.uuid4().hex


def _now_ms() -> int:
    return int(time.time() * 1000)


class Document(BaseModel):
    """Uploaded file text with its token estimate cached at ingestion."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    content: str
    tokens: int = Field(..., ge=0)
    id: str = Field(default_factory=_new_id)

    @classmethod
    def from_text(cls, name: str, content: str, type: str = "text/plain") -> "Document":
        return cls(name=name, type=type, content=content, tokens=estimate_token_count(content))


class Message(BaseModel):
    """One chat turn."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model"]
    content: str
    sources: Optional[Tuple[str, ...]] = None
    id: str = Field(default_factory=_new_id)
    timestamp: int = Field(default_factory=_now_ms)


class ModelConfig(BaseModel):
    """Generation settings for Gemini."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(DEFAULT_TEMPERATURE, ge=MIN_TEMPERATURE, le=MAX_TEMPERATURE)
    max_output_tokens: int = Field(DEFAULT_MAX_OUTPUT_TOKENS, ge=MIN_OUTPUT_TOKENS, le=MAX_OUTPUT_TOKENS)
