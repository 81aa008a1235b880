"""Tests for the Gemini relay.

All tests are deterministic and do not make real network calls.
"""

import pytest
from langchain_core.messages import SystemMessage

from config.env_var import LLM_MODEL
from config.context_prompt import (
    EMPTY_RESPONSE_FALLBACK,
    GENERIC_ERROR_MESSAGE,
    QUOTA_EXCEEDED_MESSAGE,
    TRUNCATION_NOTICE,
)
from utils.gemini_utils import (
    ErrorKind,
    GenerationFailureError,
    MissingCredentialError,
    QuotaExceededError,
    build_llm,
    classify_error,
    generate_rag_response,
    relay_response,
)
from utils.models import Document, Message, ModelConfig
from utils.prompt_utils import compose_prompt


@pytest.fixture
def prompt():
    return compose_prompt("ctx", False, "en", [], "What is this about?")


class FakeApiError(Exception):
    def __init__(self, message: str, code=None):
        super().__init__(message)
        self.code = code


def test_classify_error_by_message() -> None:
    """'429' anywhere in the message means quota exceeded."""
    assert classify_error(Exception("429 Resource has been exhausted")) is ErrorKind.QUOTA_EXCEEDED
    assert classify_error(Exception("400 API key not valid")) is ErrorKind.GENERATION_FAILURE


def test_classify_error_by_code() -> None:
    """A 429 status code on the error is also recognised."""
    assert classify_error(FakeApiError("Too many requests", code=429)) is ErrorKind.QUOTA_EXCEEDED
    assert classify_error(FakeApiError("Internal", code=500)) is ErrorKind.GENERATION_FAILURE


def test_relay_returns_text_verbatim(prompt, make_llm) -> None:
    """A successful answer is returned unchanged."""
    llm = make_llm(content="  The report covers Q3 sales. ")

    assert relay_response(prompt, ModelConfig(), "en", "key", llm=llm) == "  The report covers Q3 sales. "
    assert len(llm.calls) == 1
    assert isinstance(llm.calls[0][0], SystemMessage)


def test_relay_joins_content_parts(prompt, make_llm) -> None:
    """Multi-part content is flattened to its text parts."""
    llm = make_llm(content=[{"type": "text", "text": "Hello "}, "world"])

    assert relay_response(prompt, ModelConfig(), "en", "key", llm=llm) == "Hello world"


@pytest.mark.parametrize("language", ["en", "am"])
def test_empty_response_uses_language_fallback(prompt, make_llm, language: str) -> None:
    """An empty answer becomes the fixed sentence in the selected language."""
    llm = make_llm(content="")

    assert relay_response(prompt, ModelConfig(), language, "key", llm=llm) == EMPTY_RESPONSE_FALLBACK[language]


def test_quota_error_surfaces_fixed_notice(prompt, make_llm) -> None:
    """The raw 429 text is replaced by the quota notice, and the call is not retried."""
    original = Exception("429 Quota exceeded for quota metric 'generate_content_free_tier_input_token_count'")
    llm = make_llm(error=original)

    with pytest.raises(QuotaExceededError) as exc_info:
        relay_response(prompt, ModelConfig(), "en", "key", llm=llm)

    assert str(exc_info.value) == QUOTA_EXCEEDED_MESSAGE
    assert exc_info.value.__cause__ is original
    assert len(llm.calls) == 1


def test_other_error_keeps_original_message(prompt, make_llm) -> None:
    """Non-quota failures surface the collaborator's message."""
    llm = make_llm(error=Exception("400 API key not valid. Please pass a valid API key."))

    with pytest.raises(GenerationFailureError, match="API key not valid"):
        relay_response(prompt, ModelConfig(), "en", "key", llm=llm)


def test_error_without_message_uses_generic_text(prompt, make_llm) -> None:
    """A bare exception falls back to the generic error text."""
    llm = make_llm(error=RuntimeError())

    with pytest.raises(GenerationFailureError) as exc_info:
        relay_response(prompt, ModelConfig(), "en", "key", llm=llm)

    assert str(exc_info.value) == GENERIC_ERROR_MESSAGE


def test_missing_key_never_calls_model(prompt, fake_llm) -> None:
    """No API key means no request."""
    with pytest.raises(MissingCredentialError):
        relay_response(prompt, ModelConfig(), "en", "", llm=fake_llm)

    assert fake_llm.calls == []


def test_generate_rag_response_end_to_end(fake_llm) -> None:
    """Documents reach the system instruction; sources are the included documents."""
    docs = [Document.from_text("guide.txt", "The office opens at 9am."), Document.from_text("faq.txt", "No pets.")]
    history = [Message(role="model", content="Hello!")]

    answer = generate_rag_response("key", history, "When does it open?", docs, ModelConfig(), "en", llm=fake_llm)

    assert answer.text == "An answer."
    assert answer.sources == ["guide.txt", "faq.txt"]
    assert answer.truncated is False
    system = fake_llm.calls[0][0].content
    assert "--- START DOCUMENT: guide.txt ---\nThe office opens at 9am." in system
    assert TRUNCATION_NOTICE not in system
    assert fake_llm.calls[0][-1].content == "When does it open?"


def test_generate_rag_response_discloses_truncation(fake_llm) -> None:
    """When the budget cuts content, the model is told and only included names are sources."""
    docs = [Document.from_text("big.txt", "x" * 4_000), Document.from_text("late.txt", "y")]

    answer = generate_rag_response("key", [], "Summarise", docs, ModelConfig(), "en", llm=fake_llm, limit=200)

    assert answer.truncated is True
    assert answer.sources == ["big.txt"]
    assert TRUNCATION_NOTICE in fake_llm.calls[0][0].content


def test_generate_rag_response_requires_key(fake_llm) -> None:
    with pytest.raises(MissingCredentialError):
        generate_rag_response(None, [], "q", [], ModelConfig(), "en", llm=fake_llm)


def test_whitespace_answer_returned_verbatim(prompt, make_llm) -> None:
    """Only an empty answer is replaced; whitespace is passed through."""
    llm = make_llm(content="  \n")

    assert relay_response(prompt, ModelConfig(), "en", "key", llm=llm) == "  \n"


def test_build_llm_uses_configured_model_and_settings() -> None:
    """The fixed model name and the session settings reach the client, with retries off."""
    llm = build_llm("test-key", ModelConfig(temperature=0.7, max_output_tokens=900))

    assert llm.model.endswith(LLM_MODEL)
    assert llm.temperature == 0.7
    assert llm.max_output_tokens == 900
    assert llm.max_retries == 0
