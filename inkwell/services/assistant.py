"""AI writing assistant that falls back to local heuristics whenever the model cannot help."""
from __future__ import annotations

import logging
from typing import Iterable, Mapping

from jinja2 import Template

from inkwell.config import Settings
from inkwell.models.assistant import CategoryRef, LLMSuccess, OptimizationReport
from inkwell.services.fallback import (
    fallback_keywords,
    fallback_meta_description,
    fallback_titles,
)
from inkwell.services.llm import LLMInvoker, SupportsInvoke, create_content_llm
from inkwell.services.optimizer import ContentOptimizer
from inkwell.services.parsers import (
    parse_category_names,
    parse_keyword_list,
    parse_meta_description,
    parse_title_lines,
)

LOGGER = logging.getLogger(__name__)

TITLE_PROMPT = """
Based on the following blog post content, generate 5 compelling and SEO-friendly titles.
Make them engaging, clear, and under 60 characters each.
Return only the titles, one per line, without numbering or bullets.

Content: {content}
""".strip()

KEYWORD_PROMPT = """
Analyze the following blog post and extract 8-10 relevant SEO keywords and phrases.
Focus on terms that readers would search for to find this content.
Return only the keywords, separated by commas.

Title: {title}
Content: {content}
""".strip()

META_PROMPT = """
Create a compelling meta description for this blog post.
It should be 150-160 characters, include the main topic, and encourage clicks.
Make it descriptive but concise.

Title: {title}
Content: {content}

Return only the meta description, no additional text.
""".strip()

CATEGORY_PROMPT = Template(
    """
Based on the blog post content, suggest which of these existing categories best fit:
{% for category in categories %}- {{ category.name }}
{% endfor %}
Title: {{ title }}
Content: {{ content }}

Return only the category names that match, separated by commas. Maximum 3 categories.
""".strip()
)

TITLE_EXCERPT_LENGTH = 1000
KEYWORD_EXCERPT_LENGTH = 1500
META_EXCERPT_LENGTH = 1000
CATEGORY_EXCERPT_LENGTH = 1000


def _excerpt(content: str, limit: int) -> str:
    text = content or ""
    return text if len(text) <= limit else text[:limit] + "..."


def _as_category_refs(categories: Iterable[object]) -> list[CategoryRef]:
    refs: list[CategoryRef] = []
    for category in categories:
        if isinstance(category, CategoryRef):
            refs.append(category)
        elif isinstance(category, Mapping):
            refs.append(CategoryRef.from_mapping(category))
        else:
            refs.append(
                CategoryRef(
                    name=str(getattr(category, "name", "") or ""),
                    slug=str(getattr(category, "slug", "") or ""),
                )
            )
    return [ref for ref in refs if ref.name.strip()]


class AIContentService:
    """Entry point for every AI-assisted drafting operation.

    Availability is decided once, here, from the injected settings: a blank
    credential or a disabled feature flag keeps the service on heuristics for
    its whole lifetime. None of the public methods raise.
    """

    def __init__(self, settings: Settings, llm: SupportsInvoke | None = None) -> None:
        self._settings = settings
        available = settings.ai_available

        if available and llm is None:
            try:
                llm = create_content_llm(settings)
            except Exception:
                LOGGER.exception("Failed to initialise the AI client; using fallback heuristics")
                available = False

        if not available:
            llm = None
            LOGGER.info("AI assistance disabled; drafting helpers will use fallback heuristics")

        self._available = available
        self._invoker = LLMInvoker(llm=llm, available=available)
        self._optimizer = ContentOptimizer(self._invoker)

    @property
    def available(self) -> bool:
        return self._available

    def generate_title_suggestions(self, content: str) -> list[str]:
        """Return up to five title ideas for ``content``."""

        request = TITLE_PROMPT.format(content=_excerpt(content, TITLE_EXCERPT_LENGTH))
        result = self._invoker.complete(request, operation="title_suggestions")
        if isinstance(result, LLMSuccess):
            titles = parse_title_lines(result.text)
            if titles:
                return titles
        return fallback_titles(content)

    def generate_seo_keywords(self, title: str, content: str) -> list[str]:
        """Return up to ten search keywords for the draft."""

        request = KEYWORD_PROMPT.format(title=title, content=_excerpt(content, KEYWORD_EXCERPT_LENGTH))
        result = self._invoker.complete(request, operation="seo_keywords")
        if isinstance(result, LLMSuccess):
            keywords = parse_keyword_list(result.text)
            if keywords:
                return keywords
        return fallback_keywords(title, content)

    def generate_meta_description(self, title: str, content: str) -> str:
        """Return a meta description of at most 160 characters."""

        request = META_PROMPT.format(title=title, content=_excerpt(content, META_EXCERPT_LENGTH))
        result = self._invoker.complete(request, operation="meta_description")
        if isinstance(result, LLMSuccess):
            description = parse_meta_description(result.text)
            if description:
                return description
        return fallback_meta_description(title, content)

    def suggest_categories(
        self,
        title: str,
        content: str,
        existing_categories: Iterable[object],
    ) -> list[str]:
        """Return up to three names from ``existing_categories`` that suit the draft.

        There is no local heuristic for this one: without the model the
        answer is an empty list.
        """

        categories = _as_category_refs(existing_categories)
        if not categories or not self._available:
            return []

        request = CATEGORY_PROMPT.render(
            categories=categories,
            title=title,
            content=_excerpt(content, CATEGORY_EXCERPT_LENGTH),
        )
        result = self._invoker.complete(request, operation="suggest_categories")
        if not isinstance(result, LLMSuccess):
            return []
        return parse_category_names(result.text, categories)

    def optimize_content(self, content: str) -> OptimizationReport:
        """Return a readability score with improvement suggestions."""

        return self._optimizer.optimize(content)


__all__ = ["AIContentService"]
