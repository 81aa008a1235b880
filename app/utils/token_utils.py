import math

from config.env_var import CHARS_PER_TOKEN


def estimate_token_count(text: str) -> int:
    """Rough token count: ~4 chars per token. Same heuristic at ingestion and planning time."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def tokens_to_chars(tokens: int) -> int:
    """Character budget for a token budget (inverse of estimate_token_count)."""
    if tokens <= 0:
        return 0
    return tokens * CHARS_PER_TOKEN
