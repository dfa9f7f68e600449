"""Tolerant parsers for the free-text replies of the language model."""
from __future__ import annotations

import re
from typing import Iterable, Sequence

from inkwell.models.assistant import (
    DEFAULT_READABILITY_SCORE,
    MAX_READABILITY_SCORE,
    MIN_READABILITY_SCORE,
    CategoryRef,
    OptimizationReport,
)
from inkwell.services.fallback import ELLIPSIS, META_DESCRIPTION_LIMIT

MAX_TITLES = 5
MAX_KEYWORDS = 10
MAX_CATEGORIES = 3
MAX_SUGGESTIONS = 3
MAX_IMPROVEMENTS = 2

SUGGESTIONS_HEADER = "SUGGESTIONS:"
IMPROVEMENTS_HEADER = "IMPROVEMENTS:"

_ENUMERATION_RE = re.compile(r"^\s*(?:\d+\s*[.)]|[-*•])\s*")
_BULLET_PREFIXES = ("-", "*", "•")
_SCORE_RE = re.compile(r"SCORE:\s*(\d+)", re.IGNORECASE)
_QUOTES = "\"'“”"


def _strip_quotes(value: str) -> str:
    return value.strip().strip(_QUOTES).strip()


def parse_title_lines(text: str) -> list[str]:
    """Return up to five titles, one per non-blank line, without list markers."""

    titles: list[str] = []
    for line in (text or "").splitlines():
        cleaned = _strip_quotes(_ENUMERATION_RE.sub("", line))
        if cleaned:
            titles.append(cleaned)
        if len(titles) >= MAX_TITLES:
            break
    return titles


def _split_list(text: str) -> Iterable[str]:
    for chunk in re.split(r"[,\n]", text or ""):
        cleaned = _strip_quotes(_ENUMERATION_RE.sub("", chunk))
        if cleaned:
            yield cleaned


def parse_keyword_list(text: str) -> list[str]:
    """Return up to ten unique comma-separated keywords."""

    seen: set[str] = set()
    keywords: list[str] = []
    for keyword in _split_list(text):
        key = keyword.lower()
        if key in seen:
            continue
        seen.add(key)
        keywords.append(keyword)
        if len(keywords) >= MAX_KEYWORDS:
            break
    return keywords


def parse_meta_description(text: str) -> str:
    """Trim the reply and hard-cut it to the meta description limit."""

    description = " ".join(_strip_quotes(text or "").split())
    if len(description) > META_DESCRIPTION_LIMIT:
        return description[: META_DESCRIPTION_LIMIT - len(ELLIPSIS)] + ELLIPSIS
    return description


def parse_category_names(text: str, existing: Sequence[CategoryRef]) -> list[str]:
    """Return up to three suggested names that match ``existing`` categories.

    Matching ignores case; the stored spelling of the category is returned.
    """

    by_lower = {category.name.strip().lower(): category.name for category in existing if category.name.strip()}
    matched: list[str] = []
    for candidate in _split_list(text):
        name = by_lower.get(candidate.lower())
        if name is None or name in matched:
            continue
        matched.append(name)
        if len(matched) >= MAX_CATEGORIES:
            break
    return matched


def _looks_like_header(line: str) -> bool:
    return ":" in line


def extract_section(text: str, header: str) -> list[str]:
    """Collect the bullet lines that follow ``header`` up to a blank line or the next header."""

    lines = (text or "").splitlines()
    needle = header.lower()
    start = next((index for index, line in enumerate(lines) if needle in line.lower()), None)
    if start is None:
        return []

    items: list[str] = []
    for raw in lines[start + 1 :]:
        line = raw.strip()
        if line.startswith(_BULLET_PREFIXES):
            item = line.lstrip("".join(_BULLET_PREFIXES)).strip()
            if item:
                items.append(item)
        elif not line or _looks_like_header(line):
            break
    return items


def parse_readability_score(text: str) -> int:
    """Return the ``SCORE:`` value, or the default when missing or out of range."""

    match = _SCORE_RE.search(text or "")
    if not match:
        return DEFAULT_READABILITY_SCORE
    score = int(match.group(1))
    if MIN_READABILITY_SCORE <= score <= MAX_READABILITY_SCORE:
        return score
    return DEFAULT_READABILITY_SCORE


def parse_optimization_report(text: str) -> OptimizationReport:
    """Parse the labelled SUGGESTIONS/IMPROVEMENTS/SCORE reply."""

    return OptimizationReport(
        suggestions=extract_section(text, SUGGESTIONS_HEADER)[:MAX_SUGGESTIONS],
        improvements=extract_section(text, IMPROVEMENTS_HEADER)[:MAX_IMPROVEMENTS],
        readability_score=parse_readability_score(text),
    )


__all__ = [
    "IMPROVEMENTS_HEADER",
    "MAX_CATEGORIES",
    "MAX_KEYWORDS",
    "MAX_TITLES",
    "SUGGESTIONS_HEADER",
    "extract_section",
    "parse_category_names",
    "parse_keyword_list",
    "parse_meta_description",
    "parse_optimization_report",
    "parse_readability_score",
    "parse_title_lines",
]
