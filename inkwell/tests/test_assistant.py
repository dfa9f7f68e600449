from __future__ import annotations

import logging
from typing import Any, Sequence

import pytest
from google.api_core.exceptions import DeadlineExceeded
from langchain_core.messages import AIMessage

from inkwell.config import Settings
from inkwell.models.assistant import CategoryRef, LLMFailure, LLMSuccess
from inkwell.models.content import Category
from inkwell.services import assistant as assistant_module
from inkwell.services.assistant import AIContentService
from inkwell.services.fallback import (
    fallback_keywords,
    fallback_meta_description,
    fallback_titles,
)
from inkwell.services.llm import LLMInvoker, SYSTEM_PROMPT, extract_text

DRAFT_TITLE = "Python Testing Tips"
DRAFT_BODY = "Learn how pytest fixtures make testing easier and faster with Python. " * 3


class DummyLLM:
    """Simple fake LLM that returns a fixed AIMessage payload."""

    def __init__(self, response: str) -> None:
        self._response = response
        self.calls: list[Sequence[Any]] = []

    def invoke(self, input: Any, **_: Any) -> AIMessage:
        self.calls.append(input if isinstance(input, list) else [input])
        return AIMessage(content=self._response)


class FailingLLM:
    """Fake LLM that raises the configured exception on every call."""

    def __init__(self, error: Exception) -> None:
        self._error = error
        self.calls = 0

    def invoke(self, input: Any, **_: Any) -> AIMessage:
        self.calls += 1
        raise self._error


def _human_prompt(llm: DummyLLM, index: int = 0) -> str:
    return str(llm.calls[index][-1].content)


def test_service_without_credential_never_calls_the_model(offline_settings: Settings) -> None:
    llm = DummyLLM("should never be used")
    service = AIContentService(offline_settings, llm=llm)

    assert service.available is False
    assert service.generate_title_suggestions(DRAFT_BODY) == fallback_titles(DRAFT_BODY)
    assert service.generate_seo_keywords(DRAFT_TITLE, DRAFT_BODY) == fallback_keywords(DRAFT_TITLE, DRAFT_BODY)
    assert service.generate_meta_description(DRAFT_TITLE, DRAFT_BODY) == fallback_meta_description(
        DRAFT_TITLE, DRAFT_BODY
    )
    assert service.suggest_categories(DRAFT_TITLE, DRAFT_BODY, [CategoryRef("Technology")]) == []
    report = service.optimize_content(DRAFT_BODY)
    assert (report.suggestions, report.improvements, report.readability_score) == ([], [], 7)
    assert llm.calls == []


def test_disabled_flag_overrides_present_credential(tmp_path) -> None:
    settings = Settings(gemini_api_key="test-key", ai_enabled=False, db_path=tmp_path / "blog.db")
    llm = DummyLLM("Title")

    service = AIContentService(settings, llm=llm)

    assert service.available is False
    service.generate_title_suggestions(DRAFT_BODY)
    assert llm.calls == []


def test_client_construction_failure_marks_service_unavailable(
    online_settings: Settings, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def _boom(_settings: Settings) -> None:
        raise ValueError("bad credentials")

    monkeypatch.setattr(assistant_module, "create_content_llm", _boom)

    with caplog.at_level(logging.ERROR):
        service = AIContentService(online_settings)

    assert service.available is False
    assert "Failed to initialise the AI client" in caplog.text
    assert service.generate_title_suggestions(DRAFT_BODY) == fallback_titles(DRAFT_BODY)


def test_title_suggestions_parse_model_reply(online_settings: Settings) -> None:
    llm = DummyLLM("1. Testing With Pytest\n2. Fixtures Explained\n\n3. Faster Python Tests")
    service = AIContentService(online_settings, llm=llm)

    titles = service.generate_title_suggestions(DRAFT_BODY)

    assert titles == ["Testing With Pytest", "Fixtures Explained", "Faster Python Tests"]
    assert len(llm.calls) == 1
    assert llm.calls[0][0].content == SYSTEM_PROMPT
    assert "generate 5 compelling and SEO-friendly titles" in _human_prompt(llm)
    assert DRAFT_BODY.strip() in _human_prompt(llm)


def test_long_content_is_excerpted_in_prompts(online_settings: Settings) -> None:
    llm = DummyLLM("keyword")
    service = AIContentService(online_settings, llm=llm)
    body = "a" * 1200 + "b" * 1000

    service.generate_title_suggestions(body)
    service.generate_seo_keywords("Title", body)

    title_prompt = _human_prompt(llm, 0)
    keyword_prompt = _human_prompt(llm, 1)
    assert "a" * 1000 + "..." in title_prompt
    assert "b" * 10 not in title_prompt
    assert "a" * 1200 + "b" * 300 + "..." in keyword_prompt


def test_keywords_parse_model_reply(online_settings: Settings) -> None:
    llm = DummyLLM("pytest, fixtures, Python testing, pytest")
    service = AIContentService(online_settings, llm=llm)

    assert service.generate_seo_keywords(DRAFT_TITLE, DRAFT_BODY) == ["pytest", "fixtures", "Python testing"]
    assert f"Title: {DRAFT_TITLE}" in _human_prompt(llm)


def test_meta_description_is_trimmed_to_limit(online_settings: Settings) -> None:
    llm = DummyLLM("  " + "Great read. " * 30)
    service = AIContentService(online_settings, llm=llm)

    description = service.generate_meta_description(DRAFT_TITLE, DRAFT_BODY)

    assert len(description) == 160
    assert description.endswith("...")
    assert description.startswith("Great read. Great read.")


def test_upstream_error_falls_back_and_logs(online_settings: Settings, caplog: pytest.LogCaptureFixture) -> None:
    llm = FailingLLM(RuntimeError("quota exceeded"))
    service = AIContentService(online_settings, llm=llm)

    with caplog.at_level(logging.ERROR):
        titles = service.generate_title_suggestions(DRAFT_BODY)
        keywords = service.generate_seo_keywords(DRAFT_TITLE, DRAFT_BODY)
        description = service.generate_meta_description(DRAFT_TITLE, DRAFT_BODY)
        categories = service.suggest_categories(DRAFT_TITLE, DRAFT_BODY, [CategoryRef("Technology")])
        report = service.optimize_content(DRAFT_BODY)

    assert titles == fallback_titles(DRAFT_BODY)
    assert keywords == fallback_keywords(DRAFT_TITLE, DRAFT_BODY)
    assert description == fallback_meta_description(DRAFT_TITLE, DRAFT_BODY)
    assert categories == []
    assert report.readability_score == 7
    assert llm.calls == 5
    assert service.available is True
    assert "AI request for title_suggestions failed" in caplog.text


@pytest.mark.parametrize("error", [DeadlineExceeded("deadline"), TimeoutError("slow")])
def test_timeout_falls_back(online_settings: Settings, error: Exception, caplog: pytest.LogCaptureFixture) -> None:
    service = AIContentService(online_settings, llm=FailingLLM(error))

    with caplog.at_level(logging.ERROR):
        keywords = service.generate_seo_keywords(DRAFT_TITLE, DRAFT_BODY)

    assert keywords == fallback_keywords(DRAFT_TITLE, DRAFT_BODY)
    assert "timed out" in caplog.text


@pytest.mark.parametrize("reply", ["", "   \n  ", "- \n* \n"])
def test_empty_or_unparseable_reply_falls_back(online_settings: Settings, reply: str) -> None:
    service = AIContentService(online_settings, llm=DummyLLM(reply))

    assert service.generate_title_suggestions(DRAFT_BODY) == fallback_titles(DRAFT_BODY)
    assert service.generate_seo_keywords(DRAFT_TITLE, DRAFT_BODY) == fallback_keywords(DRAFT_TITLE, DRAFT_BODY)


def test_suggest_categories_filters_to_existing_names(online_settings: Settings) -> None:
    llm = DummyLLM("technology, Cooking, writing")
    service = AIContentService(online_settings, llm=llm)
    existing = [
        Category(name="Technology", slug="technology", id="c1"),
        {"name": "Writing", "slug": "writing"},
        CategoryRef("Travel", "travel"),
    ]

    result = service.suggest_categories(DRAFT_TITLE, DRAFT_BODY, existing)

    assert result == ["Technology", "Writing"]
    prompt = _human_prompt(llm)
    assert "- Technology\n- Writing\n- Travel\n" in prompt
    assert "Maximum 3 categories" in prompt


def test_suggest_categories_skips_model_without_categories(online_settings: Settings) -> None:
    llm = DummyLLM("Technology")
    service = AIContentService(online_settings, llm=llm)

    assert service.suggest_categories(DRAFT_TITLE, DRAFT_BODY, []) == []
    assert llm.calls == []


def test_optimize_content_parses_labelled_reply(online_settings: Settings) -> None:
    reply = "SUGGESTIONS:\n- Add an example\n- Trim the intro\n\nIMPROVEMENTS:\n- Shorter sentences\n\nSCORE: 6"
    llm = DummyLLM(reply)
    service = AIContentService(online_settings, llm=llm)

    report = service.optimize_content("x" * 2500)

    assert report.as_dict() == {
        "suggestions": ["Add an example", "Trim the intro"],
        "improvements": ["Shorter sentences"],
        "readabilityScore": 6,
    }
    prompt = _human_prompt(llm)
    assert "x" * 2000 in prompt
    assert "x" * 2001 not in prompt


def test_invoker_reports_outcomes_as_values() -> None:
    assert LLMInvoker(llm=None, available=True).complete("hi", operation="test") == LLMFailure("unavailable")
    assert LLMInvoker(llm=DummyLLM("  hello "), available=True).complete("hi", operation="test") == LLMSuccess(
        "hello"
    )
    assert LLMInvoker(llm=DummyLLM(""), available=True).complete("hi", operation="test") == LLMFailure("empty")

    failure = LLMInvoker(llm=FailingLLM(RuntimeError("boom")), available=True).complete("hi", operation="test")
    assert isinstance(failure, LLMFailure)
    assert failure.kind == "upstream"
    assert failure.message == "boom"


def test_extract_text_handles_message_shapes() -> None:
    assert extract_text("plain") == "plain"
    assert extract_text(None) == ""
    assert extract_text(AIMessage(content=[{"type": "text", "text": "a"}, "b"])) == "ab"
    assert extract_text({"content": "from dict"}) == "from dict"
