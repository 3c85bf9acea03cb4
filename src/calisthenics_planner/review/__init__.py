"""Optional LLM coach review and AI-authored program mode."""

from .authoring import author_program, parse_authored_program
from .client import (
    CompletionClient,
    CompletionTimeoutError,
    EmptyCompletionError,
    RateLimitError,
    ReviewError,
)
from .pipeline import attach_reviews, build_week_digest, fallback_text, review_program

__all__ = [
    "CompletionClient",
    "CompletionTimeoutError",
    "EmptyCompletionError",
    "RateLimitError",
    "ReviewError",
    "attach_reviews",
    "author_program",
    "build_week_digest",
    "fallback_text",
    "parse_authored_program",
    "review_program",
]
