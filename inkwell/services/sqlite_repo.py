"""SQLite-backed post and category repository.

Design notes
------------
- Each entity is stored verbatim as its ``to_document()`` JSON in a ``data``
  column; a few columns (slug, title, content, published, created_at) are
  denormalised for lookups, filtering and ordering.
- Post/category membership lives in the ``post_categories`` junction table and
  is the source of truth for ``Post.category_ids``.
- WAL mode and foreign keys are enabled. Suitable for single-writer,
  multi-reader use.

Default location (if not provided): ~/inkwell/data/blog.db
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone
import json
from pathlib import Path
import secrets
import sqlite3
from typing import Any, Final

from inkwell.config import DEFAULT_DB_PATH
from inkwell.models.content import Category, Post

MEMORY_DB: Final[str] = ":memory:"


class _DictSnapshot:
    """Duck-type of a document snapshot for ``Model.from_document(...)``."""

    __slots__ = ("id", "_data")

    def __init__(self, doc_id: str, data: dict[str, Any]) -> None:
        self.id = doc_id
        self._data = data

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)


def _to_iso8601(value: datetime | date) -> str:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).isoformat()


def _json_default(o: object):
    if isinstance(o, (datetime, date)):
        return _to_iso8601(o)
    if isinstance(o, set):
        return list(o)
    if isinstance(o, Path):
        return str(o)
    return str(o)


def _json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"), default=_json_default)


def _json_or_none(txt: str | None) -> dict[str, Any] | None:
    if not txt:
        return None
    return json.loads(txt)


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class LocalSQLiteBlogRepository:
    """SQLite repository for posts, categories and their links."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        if db_path == MEMORY_DB:
            target: str | Path = MEMORY_DB
        else:
            target = Path(db_path) if db_path else DEFAULT_DB_PATH
            target.parent.mkdir(parents=True, exist_ok=True)
        self._db_path = target
        self._conn = sqlite3.connect(target, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        with self._conn:
            self._conn.execute("PRAGMA foreign_keys = ON;")
            self._conn.execute("PRAGMA journal_mode = WAL;")
        self._bootstrap()

    # --- schema ----------------------------------------------------------------

    def _bootstrap(self) -> None:
        """Create required tables and indexes if they don't exist."""
        with self._conn:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS posts (
                    id TEXT PRIMARY KEY,
                    slug TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    published INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    data TEXT NOT NULL
                );
                """
            )
            self._conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_posts_created ON posts(created_at DESC);"
            )
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS categories (
                    id TEXT PRIMARY KEY,
                    slug TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    data TEXT NOT NULL
                );
                """
            )
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS post_categories (
                    post_id TEXT NOT NULL,
                    category_id TEXT NOT NULL,
                    PRIMARY KEY (post_id, category_id),
                    FOREIGN KEY(post_id) REFERENCES posts(id) ON DELETE CASCADE,
                    FOREIGN KEY(category_id) REFERENCES categories(id) ON DELETE CASCADE
                );
                """
            )
            self._conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_post_categories_category ON post_categories(category_id);"
            )

    # --- Posts ------------------------------------------------------------------

    def list_posts(
        self,
        *,
        published: bool | None = None,
        category_id: str | None = None,
        search: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Post]:
        """Return posts newest first, optionally filtered."""
        clauses: list[str] = []
        params: list[Any] = []

        if published is not None:
            clauses.append("p.published = ?")
            params.append(1 if published else 0)
        if category_id:
            clauses.append("p.id IN (SELECT post_id FROM post_categories WHERE category_id = ?)")
            params.append(category_id)
        if search and search.strip():
            pattern = _like_pattern(search.strip())
            clauses.append("(p.title LIKE ? ESCAPE '\\' OR p.content LIKE ? ESCAPE '\\')")
            params.extend([pattern, pattern])

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._conn.execute(
            f"""
            SELECT p.id, p.data FROM posts p
            {where}
            ORDER BY p.created_at DESC, p.rowid DESC
            LIMIT ? OFFSET ?;
            """,
            (*params, int(limit), int(offset)),
        ).fetchall()
        return [self._row_to_post(row) for row in rows]

    def get_post(self, post_id: str) -> Post | None:
        row = self._conn.execute("SELECT id, data FROM posts WHERE id = ?;", (post_id,)).fetchone()
        return self._row_to_post(row) if row else None

    def get_post_by_slug(self, slug: str) -> Post | None:
        row = self._conn.execute("SELECT id, data FROM posts WHERE slug = ?;", (slug,)).fetchone()
        return self._row_to_post(row) if row else None

    def save_post(self, post: Post) -> Post:
        """Insert or update a post and replace its category links."""
        post_id = post.id or self._generate_id()
        post.id = post_id
        doc = post.to_document()
        category_ids = doc.pop("category_ids", [])
        payload = _json(doc)

        with self._conn:
            self._conn.execute(
                """
                INSERT INTO posts(id, slug, title, content, published, created_at, updated_at, data)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    slug = excluded.slug,
                    title = excluded.title,
                    content = excluded.content,
                    published = excluded.published,
                    updated_at = excluded.updated_at,
                    data = excluded.data;
                """,
                (
                    post_id,
                    post.slug,
                    post.title,
                    post.content,
                    1 if post.published else 0,
                    _to_iso8601(post.created_at),
                    _to_iso8601(post.updated_at),
                    payload,
                ),
            )
            self._conn.execute("DELETE FROM post_categories WHERE post_id = ?;", (post_id,))
            self._link_categories(post_id, category_ids)

        stored = self.get_post(post_id)
        if stored is None:
            raise KeyError(f"Post {post_id} was not stored")
        return stored

    def delete_post(self, post_id: str) -> bool:
        with self._conn:
            cursor = self._conn.execute("DELETE FROM posts WHERE id = ?;", (post_id,))
        return cursor.rowcount > 0

    def delete_posts(self, post_ids: Sequence[str]) -> int:
        if not post_ids:
            return 0
        placeholders = ", ".join("?" for _ in post_ids)
        with self._conn:
            cursor = self._conn.execute(f"DELETE FROM posts WHERE id IN ({placeholders});", tuple(post_ids))
        return cursor.rowcount

    def add_post_categories(self, post_ids: Sequence[str], category_ids: Sequence[str]) -> None:
        """Link every post in ``post_ids`` to every category in ``category_ids``."""
        with self._conn:
            for post_id in post_ids:
                self._link_categories(post_id, category_ids)

    def set_post_categories(self, post_ids: Sequence[str], category_ids: Sequence[str]) -> None:
        """Replace the category links of every post in ``post_ids``."""
        with self._conn:
            for post_id in post_ids:
                self._conn.execute("DELETE FROM post_categories WHERE post_id = ?;", (post_id,))
                self._link_categories(post_id, category_ids)

    def _link_categories(self, post_id: str, category_ids: Iterable[str]) -> None:
        for category_id in category_ids:
            self._conn.execute(
                """
                INSERT OR IGNORE INTO post_categories(post_id, category_id)
                SELECT p.id, c.id FROM posts p, categories c
                WHERE p.id = ? AND c.id = ?;
                """,
                (post_id, category_id),
            )

    def _category_ids_for(self, post_id: str) -> list[str]:
        rows = self._conn.execute(
            """
            SELECT pc.category_id FROM post_categories pc
            JOIN categories c ON c.id = pc.category_id
            WHERE pc.post_id = ?
            ORDER BY c.name COLLATE NOCASE;
            """,
            (post_id,),
        ).fetchall()
        return [row["category_id"] for row in rows]

    # --- Categories -------------------------------------------------------------

    _CATEGORY_SELECT: Final[str] = """
        SELECT c.id, c.data, COUNT(pc.post_id) AS post_count
        FROM categories c
        LEFT JOIN post_categories pc ON pc.category_id = c.id
    """

    def list_categories(self) -> list[Category]:
        """Return all categories, newest first, with their post counts."""
        rows = self._conn.execute(
            f"{self._CATEGORY_SELECT} GROUP BY c.id ORDER BY c.created_at DESC;"
        ).fetchall()
        return [self._row_to_category(row) for row in rows]

    def list_popular_categories(self, limit: int = 10) -> list[Category]:
        """Return the categories with the most linked posts first."""
        rows = self._conn.execute(
            f"{self._CATEGORY_SELECT} GROUP BY c.id ORDER BY post_count DESC, c.created_at DESC LIMIT ?;",
            (int(limit),),
        ).fetchall()
        return [self._row_to_category(row) for row in rows]

    def get_category(self, category_id: str) -> Category | None:
        row = self._conn.execute(
            f"{self._CATEGORY_SELECT} WHERE c.id = ? GROUP BY c.id;", (category_id,)
        ).fetchone()
        return self._row_to_category(row) if row else None

    def get_category_by_slug(self, slug: str) -> Category | None:
        row = self._conn.execute(
            f"{self._CATEGORY_SELECT} WHERE c.slug = ? GROUP BY c.id;", (slug,)
        ).fetchone()
        return self._row_to_category(row) if row else None

    def save_category(self, category: Category) -> Category:
        category_id = category.id or self._generate_id()
        category.id = category_id
        doc = category.to_document()

        with self._conn:
            self._conn.execute(
                """
                INSERT INTO categories(id, slug, name, created_at, data)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    slug = excluded.slug,
                    name = excluded.name,
                    data = excluded.data;
                """,
                (category_id, category.slug, category.name, _to_iso8601(category.created_at), _json(doc)),
            )

        stored = self.get_category(category_id)
        if stored is None:
            raise KeyError(f"Category {category_id} was not stored")
        return stored

    def delete_category(self, category_id: str) -> bool:
        with self._conn:
            cursor = self._conn.execute("DELETE FROM categories WHERE id = ?;", (category_id,))
        return cursor.rowcount > 0

    # --- Seed utility -----------------------------------------------------------

    def seed_if_empty(
        self,
        *,
        categories: Iterable[Category] = (),
        posts: Iterable[Post] = (),
    ) -> dict[str, list[str]]:
        """Seed the database if empty, returning created IDs by table."""
        created_categories: list[str] = []
        created_posts: list[str] = []

        if self._is_table_empty("categories"):
            for category in categories:
                created_categories.append(self.save_category(category).id or "")

        if self._is_table_empty("posts"):
            for post in posts:
                created_posts.append(self.save_post(post).id or "")

        return {"categories": created_categories, "posts": created_posts}

    def _is_table_empty(self, table: str) -> bool:
        row = self._conn.execute(f"SELECT 1 FROM {table} LIMIT 1;").fetchone()
        return row is None

    def close(self) -> None:
        self._conn.close()

    # --- Conversions ------------------------------------------------------------

    def _row_to_post(self, row: sqlite3.Row) -> Post:
        data = _json_or_none(row["data"]) or {}
        data["category_ids"] = self._category_ids_for(row["id"])
        return Post.from_document(_DictSnapshot(str(row["id"]), data))

    def _row_to_category(self, row: sqlite3.Row) -> Category:
        data = _json_or_none(row["data"]) or {}
        data["post_count"] = row["post_count"]
        return Category.from_document(_DictSnapshot(str(row["id"]), data))

    @staticmethod
    def _generate_id() -> str:
        return secrets.token_urlsafe(15).replace("-", "_").replace(".", "_")


__all__ = ["LocalSQLiteBlogRepository", "MEMORY_DB"]
