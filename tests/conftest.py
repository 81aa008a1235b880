"""Shared pytest fixtures."""

import pytest
from langchain_core.messages import AIMessage


class FakeChatModel:
    """Stands in for ChatGoogleGenerativeAI; records every invoke call."""

    def __init__(self, content="An answer.", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.content)


@pytest.fixture
def fake_llm() -> FakeChatModel:
    return FakeChatModel()


@pytest.fixture
def make_llm():
    return FakeChatModel
