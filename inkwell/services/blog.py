"""Post and category rules layered over the repository."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol, Sequence

from inkwell.models.content import Category, Post
from inkwell.utils.slug import slugify
from inkwell.utils.text import reading_time, word_count

LOGGER = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255
MIN_CONTENT_LENGTH = 10
MAX_CATEGORY_NAME_LENGTH = 100


class BlogError(Exception):
    """Base class for blog domain errors."""


class PostNotFoundError(BlogError):
    def __init__(self, key: str) -> None:
        super().__init__("Post not found")
        self.key = key


class CategoryNotFoundError(BlogError):
    def __init__(self, key: str) -> None:
        super().__init__("Category not found")
        self.key = key


class SlugConflictError(BlogError):
    def __init__(self, kind: str, slug: str) -> None:
        super().__init__(f"A {kind} with this {'title' if kind == 'post' else 'name'} already exists")
        self.kind = kind
        self.slug = slug


class BlogRepository(Protocol):
    """Contract for storing posts and categories."""

    def list_posts(
        self,
        *,
        published: bool | None = None,
        category_id: str | None = None,
        search: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Post]: ...

    def get_post(self, post_id: str) -> Post | None: ...

    def get_post_by_slug(self, slug: str) -> Post | None: ...

    def save_post(self, post: Post) -> Post: ...

    def delete_post(self, post_id: str) -> bool: ...

    def delete_posts(self, post_ids: Sequence[str]) -> int: ...

    def add_post_categories(self, post_ids: Sequence[str], category_ids: Sequence[str]) -> None: ...

    def set_post_categories(self, post_ids: Sequence[str], category_ids: Sequence[str]) -> None: ...

    def list_categories(self) -> list[Category]: ...

    def list_popular_categories(self, limit: int = 10) -> list[Category]: ...

    def get_category(self, category_id: str) -> Category | None: ...

    def get_category_by_slug(self, slug: str) -> Category | None: ...

    def save_category(self, category: Category) -> Category: ...

    def delete_category(self, category_id: str) -> bool: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _validate_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValueError("Title is required")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise ValueError(f"Title must be less than {MAX_TITLE_LENGTH} characters")
    if not slugify(cleaned):
        raise ValueError("Title must contain at least one letter or digit")
    return cleaned


def _validate_content(content: str) -> str:
    if len((content or "").strip()) < MIN_CONTENT_LENGTH:
        raise ValueError(f"Content must be at least {MIN_CONTENT_LENGTH} characters")
    return content


def _validate_category_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Name is required")
    if len(cleaned) > MAX_CATEGORY_NAME_LENGTH:
        raise ValueError(f"Name must be less than {MAX_CATEGORY_NAME_LENGTH} characters")
    if not slugify(cleaned):
        raise ValueError("Name must contain at least one letter or digit")
    return cleaned


@dataclass(slots=True)
class PostChanges:
    """Partial update for a post; ``None`` leaves a field untouched."""

    title: str | None = None
    content: str | None = None
    published: bool | None = None
    meta_description: str | None = None
    seo_keywords: list[str] | None = None
    category_ids: list[str] | None = None
    scheduled_for: datetime | None = None


@dataclass(slots=True)
class BlogService:
    """Create, edit and organise posts and categories."""

    repository: BlogRepository
    clock: Any = field(default=_now)

    # --- Posts ------------------------------------------------------------------

    def list_posts(self, **filters: Any) -> list[Post]:
        return self.repository.list_posts(**filters)

    def get_post(self, post_id: str) -> Post:
        post = self.repository.get_post(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post

    def get_post_by_slug(self, slug: str) -> Post:
        post = self.repository.get_post_by_slug(slug)
        if post is None:
            raise PostNotFoundError(slug)
        return post

    def create_post(
        self,
        *,
        title: str,
        content: str,
        published: bool = False,
        category_ids: Sequence[str] = (),
        meta_description: str | None = None,
        seo_keywords: Sequence[str] = (),
        scheduled_for: datetime | None = None,
    ) -> Post:
        title = _validate_title(title)
        content = _validate_content(content)
        slug = slugify(title)
        if self.repository.get_post_by_slug(slug) is not None:
            raise SlugConflictError("post", slug)

        now = self.clock()
        post = Post(
            title=title,
            content=content,
            slug=slug,
            published=published,
            published_at=now if published else None,
            scheduled_for=scheduled_for,
            created_at=now,
            updated_at=now,
            reading_time=reading_time(content),
            word_count=word_count(content),
            meta_description=meta_description,
            seo_keywords=[keyword.strip() for keyword in seo_keywords if keyword.strip()],
            category_ids=list(category_ids),
        )
        stored = self.repository.save_post(post)
        LOGGER.info("Created post %s (%s)", stored.id, stored.slug)
        return stored

    def update_post(self, post_id: str, changes: PostChanges) -> Post:
        post = self.get_post(post_id)

        if changes.title is not None:
            title = _validate_title(changes.title)
            if title != post.title:
                slug = slugify(title)
                holder = self.repository.get_post_by_slug(slug)
                if holder is not None and holder.id != post.id:
                    raise SlugConflictError("post", slug)
                post.title = title
                post.slug = slug

        if changes.content is not None:
            post.content = _validate_content(changes.content)
            post.reading_time = reading_time(post.content)
            post.word_count = word_count(post.content)

        if changes.published is not None:
            if changes.published and not post.published and post.published_at is None:
                post.published_at = self.clock()
            post.published = changes.published

        if changes.meta_description is not None:
            post.meta_description = changes.meta_description
        if changes.seo_keywords is not None:
            post.seo_keywords = [keyword.strip() for keyword in changes.seo_keywords if keyword.strip()]
        if changes.category_ids is not None:
            post.category_ids = list(changes.category_ids)
        if changes.scheduled_for is not None:
            post.scheduled_for = changes.scheduled_for

        post.updated_at = self.clock()
        return self.repository.save_post(post)

    def delete_post(self, post_id: str) -> None:
        if not self.repository.delete_post(post_id):
            raise PostNotFoundError(post_id)
        LOGGER.info("Deleted post %s", post_id)

    def toggle_publish(self, post_id: str) -> Post:
        post = self.get_post(post_id)
        post.published = not post.published
        if post.published and post.published_at is None:
            post.published_at = self.clock()
        post.updated_at = self.clock()
        return self.repository.save_post(post)

    def bulk_update_status(self, post_ids: Sequence[str], published: bool) -> int:
        updated = 0
        now = self.clock()
        for post_id in post_ids:
            post = self.repository.get_post(post_id)
            if post is None:
                continue
            if published and post.published_at is None:
                post.published_at = now
            post.published = published
            post.updated_at = now
            self.repository.save_post(post)
            updated += 1
        return updated

    def bulk_delete(self, post_ids: Sequence[str]) -> int:
        return self.repository.delete_posts(list(post_ids))

    def bulk_assign_categories(
        self,
        post_ids: Sequence[str],
        category_ids: Sequence[str],
        *,
        replace: bool = False,
    ) -> int:
        if replace:
            self.repository.set_post_categories(list(post_ids), list(category_ids))
        else:
            self.repository.add_post_categories(list(post_ids), list(category_ids))
        return len(post_ids)

    def posts_by_category(
        self,
        category_slug: str,
        *,
        published: bool | None = True,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[Category, list[Post]]:
        category = self.get_category_by_slug(category_slug)
        posts = self.repository.list_posts(
            published=published,
            category_id=category.id,
            limit=limit,
            offset=offset,
        )
        return category, posts

    # --- Categories -------------------------------------------------------------

    def list_categories(self) -> list[Category]:
        return self.repository.list_categories()

    def popular_categories(self, limit: int = 10) -> list[Category]:
        return self.repository.list_popular_categories(limit)

    def get_category(self, category_id: str) -> Category:
        category = self.repository.get_category(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    def get_category_by_slug(self, slug: str) -> Category:
        category = self.repository.get_category_by_slug(slug)
        if category is None:
            raise CategoryNotFoundError(slug)
        return category

    def create_category(self, *, name: str, description: str | None = None) -> Category:
        name = _validate_category_name(name)
        slug = slugify(name)
        if self.repository.get_category_by_slug(slug) is not None:
            raise SlugConflictError("category", slug)
        category = Category(name=name, slug=slug, description=description, created_at=self.clock())
        return self.repository.save_category(category)

    def update_category(
        self,
        category_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> Category:
        category = self.get_category(category_id)
        if name is not None:
            name = _validate_category_name(name)
            if name != category.name:
                slug = slugify(name)
                holder = self.repository.get_category_by_slug(slug)
                if holder is not None and holder.id != category.id:
                    raise SlugConflictError("category", slug)
                category.name = name
                category.slug = slug
        if description is not None:
            category.description = description
        return self.repository.save_category(category)

    def delete_category(self, category_id: str) -> None:
        if not self.repository.delete_category(category_id):
            raise CategoryNotFoundError(category_id)


__all__ = [
    "BlogError",
    "BlogRepository",
    "BlogService",
    "CategoryNotFoundError",
    "PostChanges",
    "PostNotFoundError",
    "SlugConflictError",
]
