"""Deterministic writing suggestions used when the language model is unavailable.

Every function here is pure: the same inputs always produce the same output
and nothing raises for string input, however short or odd.
"""
from __future__ import annotations

import re
from typing import Final, Iterable

TITLE_COUNT: Final[int] = 5
FALLBACK_KEYWORD_LIMIT: Final[int] = 8
META_DESCRIPTION_LIMIT: Final[int] = 160
META_SNIPPET_LENGTH: Final[int] = 140
META_MIN_SENTENCE_LENGTH: Final[int] = 20
META_MIN_CUT_POSITION: Final[int] = 100
ELLIPSIS: Final[str] = "..."

DEFAULT_KEYWORDS: Final[tuple[str, ...]] = ("blog", "article", "content")

_TITLE_TEMPLATES: Final[tuple[tuple[str, str], ...]] = (
    ("{word} Guide", "New Blog Post"),
    ("Understanding {word}", "Interesting Article"),
    ("{word} Tips", "Latest Update"),
)
_GENERIC_TITLES: Final[tuple[str, ...]] = ("Featured Content", "Blog Entry")

STOP_WORDS: Final[frozenset[str]] = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
        "her", "was", "one", "our", "out", "day", "get", "has", "him", "his",
        "how", "its", "may", "new", "now", "old", "see", "two", "who", "boy",
        "did", "man", "way", "she", "use", "many", "oil", "sit", "set", "run",
        "eat", "far", "sea", "eye", "ask", "own", "say", "too", "any", "try",
        "us", "an", "as", "at", "be", "by", "do", "go", "he", "if", "in", "is",
        "it", "my", "no", "of", "on", "or", "so", "to", "up", "we",
    }
)

_MARKDOWN_MARKER_RE = re.compile(r"[#*`]")


def _words(text: str, min_length: int) -> list[str]:
    return re.findall(rf"\b\w{{{min_length},}}\b", (text or "").lower())


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def fallback_titles(content: str) -> list[str]:
    """Build five title ideas from the first distinct longer words of ``content``."""

    words = _unique(_words(content, 4))[: len(_TITLE_TEMPLATES)]
    titles: list[str] = []
    for position, (template, placeholder) in enumerate(_TITLE_TEMPLATES):
        if position < len(words):
            titles.append(template.format(word=words[position].capitalize()))
        else:
            titles.append(placeholder)
    titles.extend(_GENERIC_TITLES)
    return titles


def fallback_keywords(title: str, content: str) -> list[str]:
    """Pick up to eight keywords from the title and body, skipping stop words."""

    candidates = _unique([*_words(title, 3), *_words(content, 4)])
    keywords = [word for word in candidates if word not in STOP_WORDS][:FALLBACK_KEYWORD_LIMIT]
    return keywords or list(DEFAULT_KEYWORDS)


def clip_on_word_boundary(text: str, limit: int = META_DESCRIPTION_LIMIT) -> str:
    """Return ``text`` cut to at most ``limit`` characters, ending with an ellipsis when cut."""

    if len(text) <= limit:
        return text
    budget = limit - len(ELLIPSIS)
    head = text[:budget]
    space = head.rfind(" ")
    if space > 0:
        head = head[:space]
    return head.rstrip() + ELLIPSIS


def fallback_meta_description(title: str, content: str) -> str:
    """Derive a search snippet from the opening of ``content``."""

    clean = " ".join(_MARKDOWN_MARKER_RE.sub("", content or "").split())
    first_sentence = clean.split(".")[0]

    if META_MIN_SENTENCE_LENGTH < len(first_sentence) < META_SNIPPET_LENGTH:
        description = first_sentence + "."
    else:
        description = clean[:META_SNIPPET_LENGTH]

    # A snippet that fills the whole window is always marked as cut, even at exactly 140 characters.
    if len(description) >= META_SNIPPET_LENGTH:
        last_space = description.rfind(" ", 0, META_SNIPPET_LENGTH)
        cut = last_space if last_space > META_MIN_CUT_POSITION else META_SNIPPET_LENGTH
        description = description[:cut] + ELLIPSIS

    if not description:
        description = f"Learn more about {(title or '').strip().lower()} in this comprehensive guide."

    return clip_on_word_boundary(description)


__all__ = [
    "DEFAULT_KEYWORDS",
    "META_DESCRIPTION_LIMIT",
    "STOP_WORDS",
    "clip_on_word_boundary",
    "fallback_keywords",
    "fallback_meta_description",
    "fallback_titles",
]
