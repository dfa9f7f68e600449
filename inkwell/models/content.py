"""Domain models for posts and categories stored in the database."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Sequence


def _default_datetime() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> datetime | None:
    """Coerce a string/date/datetime value into a timezone-aware UTC datetime."""

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _listify_strings(value: Any) -> list[str]:
    """Normalise a value into a list of non-empty strings."""

    if isinstance(value, str):
        trimmed = value.strip()
        return [trimmed] if trimmed else []

    if isinstance(value, Sequence):
        result: list[str] = []
        for item in value:
            if isinstance(item, str):
                trimmed = item.strip()
                if trimmed:
                    result.append(trimmed)
        return result

    return []


def _optional_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _text_value(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _int_value(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def _snapshot_data(snapshot: Any) -> dict[str, Any]:
    if snapshot is None:
        return {}

    to_dict = getattr(snapshot, "to_dict", None)
    if callable(to_dict):
        return to_dict() or {}

    if isinstance(snapshot, dict):
        return dict(snapshot)

    return {}


def _snapshot_id(snapshot: Any) -> str | None:
    if snapshot is None:
        return None

    identifier = getattr(snapshot, "id", None)
    if identifier is not None:
        return str(identifier)

    if isinstance(snapshot, dict):
        candidate = snapshot.get("id")
        if candidate is not None:
            return str(candidate)

    return None


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass(slots=True)
class Post:
    """A Markdown blog post."""

    title: str
    content: str
    slug: str = ""
    published: bool = False
    published_at: datetime | None = None
    scheduled_for: datetime | None = None
    created_at: datetime = field(default_factory=_default_datetime)
    updated_at: datetime = field(default_factory=_default_datetime)
    reading_time: int = 0
    word_count: int = 0
    meta_description: str | None = None
    seo_keywords: list[str] = field(default_factory=list)
    category_ids: list[str] = field(default_factory=list)
    id: str | None = None

    def to_document(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "slug": self.slug,
            "published": self.published,
            "published_at": self.published_at,
            "scheduled_for": self.scheduled_for,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "reading_time": self.reading_time,
            "word_count": self.word_count,
            "meta_description": self.meta_description,
            "seo_keywords": list(self.seo_keywords),
            "category_ids": list(self.category_ids),
        }
        if self.id:
            payload["id"] = self.id
        return payload

    @classmethod
    def from_document(cls, snapshot: Any) -> "Post":
        data = _snapshot_data(snapshot)
        doc_id = _snapshot_id(snapshot) or _optional_str(data.get("id"))

        return cls(
            title=_text_value(data.get("title")),
            content=_text_value(data.get("content") or data.get("body")),
            slug=_text_value(data.get("slug")),
            published=bool(data.get("published")),
            published_at=_parse_datetime(data.get("published_at")),
            scheduled_for=_parse_datetime(data.get("scheduled_for")),
            created_at=_parse_datetime(data.get("created_at")) or _default_datetime(),
            updated_at=_parse_datetime(data.get("updated_at")) or _default_datetime(),
            reading_time=_int_value(data.get("reading_time")),
            word_count=_int_value(data.get("word_count")),
            meta_description=_optional_str(data.get("meta_description")),
            seo_keywords=_listify_strings(data.get("seo_keywords")),
            category_ids=_listify_strings(data.get("category_ids")),
            id=doc_id,
        )

    def as_dict(self) -> dict[str, Any]:
        """Serialise the post for JSON responses."""

        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "slug": self.slug,
            "published": self.published,
            "publishedAt": _iso(self.published_at),
            "scheduledFor": _iso(self.scheduled_for),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
            "readingTime": self.reading_time,
            "wordCount": self.word_count,
            "metaDescription": self.meta_description,
            "seoKeywords": list(self.seo_keywords),
            "categoryIds": list(self.category_ids),
        }


@dataclass(slots=True)
class Category:
    """A named grouping of posts."""

    name: str
    slug: str = ""
    description: str | None = None
    created_at: datetime = field(default_factory=_default_datetime)
    post_count: int = 0
    id: str | None = None

    def to_document(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "created_at": self.created_at,
        }
        if self.id:
            payload["id"] = self.id
        return payload

    @classmethod
    def from_document(cls, snapshot: Any) -> "Category":
        data = _snapshot_data(snapshot)
        doc_id = _snapshot_id(snapshot) or _optional_str(data.get("id"))

        return cls(
            name=_text_value(data.get("name")),
            slug=_text_value(data.get("slug")),
            description=_optional_str(data.get("description")),
            created_at=_parse_datetime(data.get("created_at")) or _default_datetime(),
            post_count=_int_value(data.get("post_count")),
            id=doc_id,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "createdAt": _iso(self.created_at),
            "postCount": self.post_count,
        }


__all__ = ["Category", "Post"]
