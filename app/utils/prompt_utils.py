from dataclasses import dataclass
from typing import List, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from config.env_var import HISTORY_WINDOW
from config.context_prompt import (
    SYSTEM_CONTEXT_PROMPT,
    LANGUAGE_INSTRUCTIONS,
    TRUNCATION_NOTICE,
    KNOWLEDGE_BASE_HEADER,
)
from utils.models import Message

# Message role -> Gemini content role
TURN_ROLES = {"user": "user", "model": "model"}


@dataclass(frozen=True)
class PromptTurn:
    role: str
    text: str


@dataclass(frozen=True)
class ComposedPrompt:
    system_instruction: str
    turns: List[PromptTurn]


def language_instruction(language: str) -> str:
    try:
        return LANGUAGE_INSTRUCTIONS[language]
    except KeyError:
        raise ValueError(f"Unsupported language: {language!r}") from None


def build_system_instruction(context_block: str, truncated: bool, language: str) -> str:
    """Preamble and grounding rules, language directive, optional truncation notice, then the documents."""
    parts = [SYSTEM_CONTEXT_PROMPT, language_instruction(language)]
    if truncated:
        parts.append(TRUNCATION_NOTICE)
    parts.append(f"{KNOWLEDGE_BASE_HEADER}\n{context_block}")
    return "\n\n".join(parts)


def compose_prompt(
    context_block: str,
    truncated: bool,
    language: str,
    history: Sequence[Message],
    query: str,
) -> ComposedPrompt:
    """
    Build the request for the chat model.

    Only the last HISTORY_WINDOW messages are kept; older ones are dropped.
    The new query is always the final user turn.
    """
    system_instruction = build_system_instruction(context_block, truncated, language)
    recent = list(history)[-HISTORY_WINDOW:] if HISTORY_WINDOW > 0 else []
    turns = [PromptTurn(role=TURN_ROLES[msg.role], text=msg.content) for msg in recent]
    turns.append(PromptTurn(role="user", text=query))
    return ComposedPrompt(system_instruction=system_instruction, turns=turns)


def to_chat_messages(prompt: ComposedPrompt) -> List[BaseMessage]:
    """LangChain messages for ChatGoogleGenerativeAI (system instruction first)."""
    messages: List[BaseMessage] = [SystemMessage(content=prompt.system_instruction)]
    for turn in prompt.turns:
        if turn.role == "user":
            messages.append(HumanMessage(content=turn.text))
        else:
            messages.append(AIMessage(content=turn.text))
    return messages
