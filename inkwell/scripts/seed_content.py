"""Seed the local database with starter categories and a welcome post."""

from __future__ import annotations

from datetime import datetime, timezone

from inkwell.config import configure_logging, load_settings
from inkwell.models.content import Category, Post
from inkwell.services.sqlite_repo import LocalSQLiteBlogRepository
from inkwell.utils.slug import slugify
from inkwell.utils.text import reading_time, word_count

SEED_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Technology", "Software, gadgets and the ideas behind them."),
    ("Writing", "Craft notes for people who publish."),
    ("Productivity", "Habits and tools for getting work done."),
)

WELCOME_BODY = """# Welcome to Inkwell

Inkwell is a place to draft, polish and publish Markdown posts.

- Organise posts into **categories** so readers can browse by topic.
- Ask the writing assistant for titles, keywords and a meta description.
- Publish when you're ready; drafts stay private until then.
"""


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    repository = LocalSQLiteBlogRepository(db_path=settings.db_path)
    created_at = datetime(2024, 1, 1, tzinfo=timezone.utc)

    categories = [
        Category(name=name, slug=slugify(name), description=description, created_at=created_at)
        for name, description in SEED_CATEGORIES
    ]
    title = "Welcome to Inkwell"
    posts = [
        Post(
            title=title,
            content=WELCOME_BODY,
            slug=slugify(title),
            published=True,
            published_at=created_at,
            created_at=created_at,
            updated_at=created_at,
            reading_time=reading_time(WELCOME_BODY),
            word_count=word_count(WELCOME_BODY),
            meta_description="A quick tour of Inkwell: categories, the writing assistant and publishing.",
            seo_keywords=["inkwell", "blogging", "markdown"],
        )
    ]

    created = repository.seed_if_empty(categories=categories, posts=posts)
    repository.close()

    for table, identifiers in created.items():
        if identifiers:
            print(f"Created {table}: {', '.join(identifiers)}")
        else:
            print(f"Table '{table}' already contained rows; nothing created.")


if __name__ == "__main__":
    main()
