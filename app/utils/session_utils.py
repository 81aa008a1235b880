import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from config.context_prompt import (
    WELCOME_MESSAGE,
    CHAT_CLEARED_MESSAGE,
    LANGUAGE_INSTRUCTIONS,
    MISSING_API_KEY_MESSAGE,
)
from utils.gemini_utils import GenerationError, MissingCredentialError, generate_rag_response
from utils.models import Document, Message, ModelConfig

logger = logging.getLogger(__name__)


class SessionBusyError(RuntimeError):
    """A question is already being answered."""


def _greeting(language: str) -> List[Message]:
    return [Message(role="model", content=WELCOME_MESSAGE.get(language, WELCOME_MESSAGE["en"]))]


@dataclass
class SessionState:
    """
    Everything one browser session owns: uploaded documents, chat history,
    model settings and the busy flag. Lives in st.session_state; nothing is persisted.
    """

    language: str = "en"
    documents: List[Document] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)
    model_config: ModelConfig = field(default_factory=ModelConfig)
    is_loading: bool = False
    last_error: Optional[str] = None

    def __post_init__(self):
        if self.language not in LANGUAGE_INSTRUCTIONS:
            raise ValueError(f"Unsupported language: {self.language!r}")
        if not self.messages:
            self.messages = _greeting(self.language)

    def add_documents(self, documents: Iterable[Document]) -> None:
        self.documents.extend(documents)

    def remove_document(self, document_id: str) -> None:
        self.documents = [d for d in self.documents if d.id != document_id]

    @property
    def total_tokens(self) -> int:
        return sum(d.tokens for d in self.documents)

    def append_message(self, message: Message) -> None:
        self.messages.append(message)

    def clear_chat(self) -> None:
        self.messages = [Message(role="model", content=CHAT_CLEARED_MESSAGE.get(self.language, CHAT_CLEARED_MESSAGE["en"]))]
        self.last_error = None

    def set_language(self, language: str) -> None:
        if language not in LANGUAGE_INSTRUCTIONS:
            raise ValueError(f"Unsupported language: {language!r}")
        self.language = language

    def update_config(self, **changes) -> None:
        """Replace settings fields; the result is validated like a new ModelConfig."""
        self.model_config = ModelConfig.model_validate({**self.model_config.model_dump(), **changes})

    def ask(self, query: str, api_key: Optional[str], llm=None) -> Message:
        """
        Answer one question. The user message is appended before Gemini is called;
        on failure no model message is added and the error is kept in last_error.
        """
        if not query.strip():
            raise ValueError("Query must not be empty")
        if self.is_loading:
            raise SessionBusyError("A request is already in progress")
        if not api_key:
            self.last_error = MISSING_API_KEY_MESSAGE
            raise MissingCredentialError()

        history = list(self.messages)
        self.append_message(Message(role="user", content=query))
        self.is_loading = True
        self.last_error = None
        try:
            answer = generate_rag_response(
                api_key, history, query, self.documents, self.model_config, self.language, llm=llm
            )
        except GenerationError as e:
            logger.info("Question not answered: %s", e)
            self.last_error = str(e)
            raise
        finally:
            self.is_loading = False

        reply = Message(role="model", content=answer.text, sources=tuple(answer.sources))
        self.append_message(reply)
        return reply
