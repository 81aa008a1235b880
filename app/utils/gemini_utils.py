import enum
import logging
from typing import List, NamedTuple, Optional, Sequence

from langchain_google_genai import ChatGoogleGenerativeAI

from config.env_var import LLM_MODEL, CONTEXT_TOKEN_LIMIT
from config.context_prompt import (
    EMPTY_RESPONSE_FALLBACK,
    QUOTA_EXCEEDED_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    MISSING_API_KEY_MESSAGE,
)
from utils.budget_utils import plan_context
from utils.models import Document, Message, ModelConfig
from utils.prompt_utils import ComposedPrompt, compose_prompt, to_chat_messages

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    GENERATION_FAILURE = "generation_failure"


class MissingCredentialError(RuntimeError):
    """No Gemini API key configured; the request is never sent."""

    def __init__(self, message: str = MISSING_API_KEY_MESSAGE):
        super().__init__(message)


class GenerationError(RuntimeError):
    kind = ErrorKind.GENERATION_FAILURE


class QuotaExceededError(GenerationError):
    kind = ErrorKind.QUOTA_EXCEEDED

    def __init__(self, message: str = QUOTA_EXCEEDED_MESSAGE):
        super().__init__(message)


class GenerationFailureError(GenerationError):
    kind = ErrorKind.GENERATION_FAILURE


class RagAnswer(NamedTuple):
    text: str
    sources: List[str]
    truncated: bool


def _error_text(error: BaseException) -> str:
    parts = [str(error)]
    for attr in ("code", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            parts.append(str(int(value)))
        elif value is not None:
            parts.append(str(value))
    return " ".join(parts)


def classify_error(error: BaseException) -> ErrorKind:
    """Quota/rate-limit errors are recognised by the HTTP 429 code in the error text."""
    if "429" in _error_text(error):
        return ErrorKind.QUOTA_EXCEEDED
    return ErrorKind.GENERATION_FAILURE


def to_user_error(error: BaseException) -> GenerationError:
    if classify_error(error) is ErrorKind.QUOTA_EXCEEDED:
        return QuotaExceededError()
    return GenerationFailureError(str(error).strip() or GENERIC_ERROR_MESSAGE)


def _response_text(response) -> str:
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = []
        for part in content:
            if isinstance(part, str):
                texts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                texts.append(part.get("text") or "")
        return "".join(texts)
    return ""


def build_llm(api_key: str, model_config: ModelConfig) -> ChatGoogleGenerativeAI:
    return ChatGoogleGenerativeAI(
        model=LLM_MODEL,
        google_api_key=api_key,
        temperature=model_config.temperature,
        max_output_tokens=model_config.max_output_tokens,
        max_retries=0,
    )


def relay_response(
    prompt: ComposedPrompt,
    model_config: ModelConfig,
    language: str,
    api_key: Optional[str],
    llm=None,
) -> str:
    """
    Send one composed prompt to Gemini and return its text.

    No retries. An empty answer is replaced by a fixed sentence in the
    selected language. Failures are re-raised as QuotaExceededError or
    GenerationFailureError with a user-facing message.
    """
    if not api_key:
        raise MissingCredentialError()

    if llm is None:
        llm = build_llm(api_key, model_config)

    try:
        response = llm.invoke(to_chat_messages(prompt))
    except Exception as e:
        user_error = to_user_error(e)
        if user_error.kind is ErrorKind.QUOTA_EXCEEDED:
            logger.warning("Gemini quota exceeded: %s", e)
        else:
            logger.exception("Gemini API error")
        raise user_error from e

    text = _response_text(response)
    if not text:
        logger.warning("Gemini returned an empty response")
        return EMPTY_RESPONSE_FALLBACK.get(language, EMPTY_RESPONSE_FALLBACK["en"])
    return text


def generate_rag_response(
    api_key: Optional[str],
    history: Sequence[Message],
    query: str,
    documents: Sequence[Document],
    model_config: ModelConfig,
    language: str = "en",
    llm=None,
    limit: int = CONTEXT_TOKEN_LIMIT,
) -> RagAnswer:
    """Plan the context window, compose the prompt and ask Gemini."""
    if not api_key:
        raise MissingCredentialError()

    plan = plan_context(documents, limit)
    prompt = compose_prompt(plan.context_block, plan.truncated, language, history, query)
    logger.info(
        "Sending %d turn(s) with %d/%d document(s), ~%d context tokens",
        len(prompt.turns), len(plan.entries), len(documents), plan.tokens_used,
    )
    text = relay_response(prompt, model_config, language, api_key, llm=llm)
    return RagAnswer(text=text, sources=plan.included_names, truncated=plan.truncated)
