"""Utilities for working with post text."""
from __future__ import annotations

import math
import re
from typing import Any


WORDS_PER_MINUTE = 200

_MARKDOWN_HEADING_RE = re.compile(r"(^|\n)#{1,6}\s*")
_MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_MARKDOWN_IMAGE_RE = re.compile(r"!\[[^\]]*\]\(([^)]+)\)")
_MARKDOWN_CODE_BLOCK_RE = re.compile(r"```.*?```", re.DOTALL)
_MARKDOWN_INLINE_CODE_RE = re.compile(r"`([^`]+)`")
_MARKDOWN_EMPHASIS_RE = re.compile(r"([*_]{1,3})([^*_]+)\1")
_BLOCKQUOTE_RE = re.compile(r"(^|\n)>\s*")


def markdown_to_plain_text(value: Any) -> str:
    """Convert basic Markdown content into a plain text snippet.

    Headings, links, images, emphasis markers, code and list markers are
    removed and whitespace is normalised. Non-string inputs return an empty
    string so listing excerpts stay predictable.
    """

    if not isinstance(value, str):
        return ""

    text = value
    text = _MARKDOWN_CODE_BLOCK_RE.sub(" ", text)
    text = _MARKDOWN_IMAGE_RE.sub(" ", text)
    text = _MARKDOWN_LINK_RE.sub(r"\1", text)
    text = _MARKDOWN_INLINE_CODE_RE.sub(r"\1", text)
    text = _MARKDOWN_HEADING_RE.sub(r"\1", text)
    text = _MARKDOWN_EMPHASIS_RE.sub(r"\2", text)
    text = _BLOCKQUOTE_RE.sub(r"\1", text)

    text = re.sub(r"(^|\n)[\-*+]\s+", r"\1", text)
    text = re.sub(r"(^|\n)\d+\.\s+", r"\1", text)

    text = text.replace("\r", " ")
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def excerpt(value: Any, *, limit: int = 200) -> str:
    """Return a plain-text excerpt of at most ``limit`` characters."""

    text = markdown_to_plain_text(value)
    if len(text) <= limit:
        return text
    cut = text[:limit]
    space = cut.rfind(" ")
    if space > 0:
        cut = cut[:space]
    return cut.rstrip(" ,.;:") + "..."


def word_count(text: Any) -> int:
    """Count whitespace-delimited tokens in ``text``."""

    if not isinstance(text, str):
        return 0
    return len(text.split())


def reading_time(text: Any, *, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Return the estimated reading time in whole minutes, rounded up.

    Empty or whitespace-only text takes 0 minutes.
    """

    words = word_count(text)
    if words == 0:
        return 0
    return math.ceil(words / words_per_minute)


__all__ = [
    "WORDS_PER_MINUTE",
    "excerpt",
    "markdown_to_plain_text",
    "reading_time",
    "word_count",
]
