import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from config.env_var import CONTEXT_TOKEN_LIMIT
from config.context_prompt import (
    DOCUMENT_START,
    DOCUMENT_END,
    DOCUMENT_SEPARATOR,
    TRUNCATION_MARKER,
)
from utils.models import Document
from utils.token_utils import estimate_token_count, tokens_to_chars

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedDocument:
    document: Document
    included_content: str
    truncated: bool = False

    def render(self) -> str:
        name = self.document.name
        return DOCUMENT_START.format(name=name) + self.included_content + DOCUMENT_END.format(name=name)


@dataclass
class BudgetPlan:
    """Documents selected for one request, in upload order."""

    limit: int
    entries: List[PlannedDocument] = field(default_factory=list)
    tokens_used: int = 0
    truncated: bool = False

    @property
    def context_block(self) -> str:
        return DOCUMENT_SEPARATOR.join(entry.render() for entry in self.entries)

    @property
    def included_names(self) -> List[str]:
        return [entry.document.name for entry in self.entries]


def document_overhead(name: str) -> int:
    """Estimated tokens of the start/end markers wrapped around a document."""
    return estimate_token_count(DOCUMENT_START.format(name=name)) + estimate_token_count(
        DOCUMENT_END.format(name=name)
    )


def plan_context(documents: Sequence[Document], limit: int = CONTEXT_TOKEN_LIMIT) -> BudgetPlan:
    """
    Fit documents into the token limit, strictly in the given order.

    The first document that does not fit is cut to a character prefix (plus the
    truncation marker) and nothing after it is considered. Documents are never
    reordered and remaining budget is never backfilled with later documents.
    """
    plan = BudgetPlan(limit=limit)
    marker_tokens = estimate_token_count(TRUNCATION_MARKER)

    for index, doc in enumerate(documents):
        overhead = document_overhead(doc.name)
        if plan.tokens_used + overhead >= limit:
            plan.truncated = True
            logger.info("Context limit reached: omitting %d document(s) from %r on", len(documents) - index, doc.name)
            break

        available = limit - plan.tokens_used - overhead
        if doc.tokens > available:
            plan.truncated = True
            if available <= marker_tokens:
                logger.info("Context limit reached: no room left for %r", doc.name)
                break
            char_limit = tokens_to_chars(available - marker_tokens)
            plan.entries.append(
                PlannedDocument(doc, doc.content[:char_limit] + TRUNCATION_MARKER, truncated=True)
            )
            plan.tokens_used = limit
            logger.info(
                "Truncated %r to %d of %d characters; %d later document(s) omitted",
                doc.name, char_limit, len(doc.content), len(documents) - index - 1,
            )
            break

        plan.entries.append(PlannedDocument(doc, doc.content))
        plan.tokens_used += doc.tokens + overhead

    return plan


def build_context(documents: Sequence[Document], limit: int = CONTEXT_TOKEN_LIMIT) -> Tuple[str, bool]:
    plan = plan_context(documents, limit)
    return plan.context_block, plan.truncated
