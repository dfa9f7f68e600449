from __future__ import annotations

import pytest

from inkwell.services.fallback import (
    DEFAULT_KEYWORDS,
    STOP_WORDS,
    clip_on_word_boundary,
    fallback_keywords,
    fallback_meta_description,
    fallback_titles,
)

SAMPLE_INPUTS = [
    "",
    "   ",
    "a b c",
    "The quick brown fox jumps over the lazy dog repeatedly in the forest",
    "# Heading\n\n**Bold** words and `code` with [links](https://example.com).",
    "word " * 500,
    "x" * 1000,
]


def test_fallback_titles_use_first_distinct_long_words_in_order() -> None:
    content = "The quick brown fox jumps over the lazy dog repeatedly in the forest"

    titles = fallback_titles(content)

    assert titles == [
        "Quick Guide",
        "Understanding Brown",
        "Jumps Tips",
        "Featured Content",
        "Blog Entry",
    ]


def test_fallback_titles_skip_repeated_words() -> None:
    titles = fallback_titles("Python python PYTHON testing")

    assert titles[:3] == ["Python Guide", "Understanding Testing", "Latest Update"]


def test_fallback_titles_pad_when_no_long_words() -> None:
    assert fallback_titles("a an the") == [
        "New Blog Post",
        "Interesting Article",
        "Latest Update",
        "Featured Content",
        "Blog Entry",
    ]


@pytest.mark.parametrize("content", SAMPLE_INPUTS)
def test_fallback_titles_always_return_five_non_empty_strings(content: str) -> None:
    titles = fallback_titles(content)

    assert len(titles) == 5
    assert all(title.strip() for title in titles)
    assert fallback_titles(content) == titles


def test_fallback_keywords_merge_title_and_content_without_stop_words() -> None:
    keywords = fallback_keywords(
        "Python Testing Tips",
        "Learn how pytest fixtures make testing easier and faster with Python.",
    )

    assert keywords == ["python", "testing", "tips", "learn", "pytest", "fixtures", "make", "easier"]


def test_fallback_keywords_default_for_empty_input() -> None:
    assert fallback_keywords("", "") == list(DEFAULT_KEYWORDS)
    assert fallback_keywords("The", "") == ["blog", "article", "content"]


@pytest.mark.parametrize("content", SAMPLE_INPUTS)
def test_fallback_keywords_stay_within_bounds(content: str) -> None:
    keywords = fallback_keywords("Some title here", content)

    assert 1 <= len(keywords) <= 8
    assert not set(keywords) & STOP_WORDS or keywords == list(DEFAULT_KEYWORDS)
    assert len(keywords) == len(set(keywords))


def test_fallback_meta_description_uses_first_sentence() -> None:
    content = "## Intro\nThis is a short opening sentence. More text follows here."

    assert fallback_meta_description("Ignored", content) == "Intro This is a short opening sentence."


def test_fallback_meta_description_cuts_on_word_boundary() -> None:
    content = "word " * 40
    assert len(content) == 200

    description = fallback_meta_description("Title", content)

    assert description.endswith("...")
    prefix = description[:-3]
    assert len(prefix) <= 140
    assert content.startswith(prefix)
    assert not prefix.endswith(" ")


def test_fallback_meta_description_hard_cuts_without_spaces() -> None:
    description = fallback_meta_description("Title", "a" * 200)

    assert description == "a" * 140 + "..."


def test_fallback_meta_description_templates_empty_content() -> None:
    assert fallback_meta_description("My Great Post", "  **  ") == (
        "Learn more about my great post in this comprehensive guide."
    )


def test_fallback_meta_description_clips_long_title_template() -> None:
    description = fallback_meta_description("Very Long Title " * 20, "")

    assert len(description) <= 160
    assert description.endswith("...")


@pytest.mark.parametrize("content", SAMPLE_INPUTS)
def test_fallback_meta_description_never_exceeds_limit(content: str) -> None:
    description = fallback_meta_description("A title", content)

    assert description
    assert len(description) <= 160


def test_clip_on_word_boundary_leaves_short_text_alone() -> None:
    assert clip_on_word_boundary("short text", 20) == "short text"
    assert clip_on_word_boundary("one two three four", 12) == "one two..."


def test_fallback_meta_description_marks_full_window_as_cut() -> None:
    assert fallback_meta_description("T", "a" * 140) == "a" * 140 + "..."


def test_fallback_keywords_keep_longer_common_words() -> None:
    assert fallback_keywords("SEO for Go", "this that with from") == ["seo", "this", "that", "with", "from"]
