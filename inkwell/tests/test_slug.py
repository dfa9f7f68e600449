from __future__ import annotations

import re

import pytest

from inkwell.utils.slug import slugify

SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def test_slugify_lowercases_and_hyphenates() -> None:
    assert slugify("Hello, World!") == "hello-world"
    assert slugify("  Ten   Tips -- for  Python 3.12 ") == "ten-tips-for-python-3-12"


def test_slugify_folds_accents() -> None:
    assert slugify("Café Crème Brûlée") == "cafe-creme-brulee"


def test_slugify_returns_empty_for_symbol_only_input() -> None:
    assert slugify("!!! ???") == ""
    assert slugify("") == ""
    assert slugify(None) == ""


@pytest.mark.parametrize(
    "value",
    [
        "Understanding Async IO",
        "--Leading and trailing--",
        "日本語 title",
        "a_b_c",
        "MiXeD 123 CaSe",
        "already-a-slug",
    ],
)
def test_slugify_is_idempotent_and_well_formed(value: str) -> None:
    slug = slugify(value)
    assert slugify(slug) == slug
    assert slug == "" or SLUG_RE.match(slug)
