"""FastAPI application for the Inkwell blogging platform."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from functools import lru_cache
import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field, field_validator

from inkwell.config import Settings, configure_logging, load_settings
from inkwell.models.content import Post
from inkwell.services.assistant import AIContentService
from inkwell.services.blog import (
    BlogError,
    BlogRepository,
    BlogService,
    CategoryNotFoundError,
    PostChanges,
    PostNotFoundError,
    SlugConflictError,
)
from inkwell.services.sqlite_repo import LocalSQLiteBlogRepository
from inkwell.utils.text import excerpt

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(_: FastAPI):
    configure_logging(get_settings())
    yield


app = FastAPI(title="Inkwell", lifespan=_lifespan)


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings loaded from the environment."""

    return load_settings()


@lru_cache(maxsize=1)
def _cached_repository() -> LocalSQLiteBlogRepository:
    return LocalSQLiteBlogRepository(db_path=get_settings().db_path)


def get_repository() -> BlogRepository:
    """FastAPI dependency returning the shared SQLite repository."""

    return _cached_repository()


def get_blog_service(repository: BlogRepository = Depends(get_repository)) -> BlogService:
    return BlogService(repository=repository)


@lru_cache(maxsize=1)
def get_ai_service() -> AIContentService:
    """FastAPI dependency returning the shared AI content service."""

    return AIContentService(get_settings())


def _to_http_error(exc: BlogError) -> HTTPException:
    if isinstance(exc, (PostNotFoundError, CategoryNotFoundError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, SlugConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def _invalid(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


def _post_summary(post: Post) -> dict[str, Any]:
    payload = post.as_dict()
    payload["excerpt"] = excerpt(post.content)
    return payload


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


def _strip_required(value: str, message: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(message)
    return cleaned


class PostCreateRequest(BaseModel):
    title: str = Field(..., max_length=255)
    content: str = Field(..., min_length=10)
    published: bool = False
    category_ids: list[str] = Field(default_factory=list, alias="categoryIds")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    seo_keywords: list[str] = Field(default_factory=list, alias="seoKeywords")
    scheduled_for: datetime | None = Field(default=None, alias="scheduledFor")

    model_config = {"populate_by_name": True}

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        return _strip_required(value, "Title is required")


class PostUpdateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    content: str | None = Field(default=None, min_length=10)
    published: bool | None = None
    category_ids: list[str] | None = Field(default=None, alias="categoryIds")
    meta_description: str | None = Field(default=None, alias="metaDescription")
    seo_keywords: list[str] | None = Field(default=None, alias="seoKeywords")
    scheduled_for: datetime | None = Field(default=None, alias="scheduledFor")

    model_config = {"populate_by_name": True}

    def to_changes(self) -> PostChanges:
        return PostChanges(
            title=self.title,
            content=self.content,
            published=self.published,
            meta_description=self.meta_description,
            seo_keywords=self.seo_keywords,
            category_ids=self.category_ids,
            scheduled_for=self.scheduled_for,
        )


class BulkStatusRequest(BaseModel):
    post_ids: list[str] = Field(..., alias="postIds")
    published: bool

    model_config = {"populate_by_name": True}


class BulkDeleteRequest(BaseModel):
    post_ids: list[str] = Field(..., alias="postIds")

    model_config = {"populate_by_name": True}


class BulkCategoriesRequest(BaseModel):
    post_ids: list[str] = Field(..., alias="postIds")
    category_ids: list[str] = Field(..., alias="categoryIds")
    replace: bool = False

    model_config = {"populate_by_name": True}


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., max_length=100)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return _strip_required(value, "Name is required")


class CategoryUpdateRequest(BaseModel):
    name: str | None = Field(default=None, max_length=100)
    description: str | None = None


class ContentRequest(BaseModel):
    """Draft body submitted to the writing assistant."""

    content: str = Field(..., min_length=10, description="Markdown body of the draft.")


class DraftRequest(ContentRequest):
    """Draft title and body submitted to the writing assistant."""

    title: str = Field(..., min_length=1, description="Working title of the draft.")

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        return _strip_required(value, "Title is required")


class OptimizeRequest(BaseModel):
    content: str = Field(..., min_length=50, description="Markdown body to analyse.")


class AssistantResponse(BaseModel):
    """Fields shared by every writing-assistant response."""

    success: bool = True
    ai_available: bool = Field(..., alias="aiAvailable", description="False when answers come from heuristics.")

    model_config = {"populate_by_name": True}


class TitleSuggestionsResponse(AssistantResponse):
    suggestions: list[str]


class KeywordsResponse(AssistantResponse):
    keywords: list[str]


class MetaDescriptionResponse(AssistantResponse):
    meta_description: str = Field(..., alias="metaDescription")


class CategorySuggestion(BaseModel):
    id: str | None
    name: str
    slug: str


class CategorySuggestionsResponse(AssistantResponse):
    suggestions: list[CategorySuggestion]


class OptimizationResponse(AssistantResponse):
    suggestions: list[str]
    improvements: list[str]
    readability_score: int = Field(..., ge=1, le=10, alias="readabilityScore")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.get("/api/posts")
async def list_posts(
    published: bool | None = None,
    category_id: str | None = Query(default=None, alias="categoryId"),
    search: str | None = None,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: BlogService = Depends(get_blog_service),
) -> list[dict[str, Any]]:
    """Return posts newest first, filtered by status, category and search term."""

    posts = service.list_posts(
        published=published,
        category_id=category_id,
        search=search,
        limit=limit,
        offset=offset,
    )
    return [_post_summary(post) for post in posts]


@app.get("/api/posts/slug/{slug}")
async def get_post_by_slug(slug: str, service: BlogService = Depends(get_blog_service)) -> dict[str, Any]:
    try:
        return service.get_post_by_slug(slug).as_dict()
    except BlogError as exc:
        raise _to_http_error(exc) from exc


@app.get("/api/posts/{post_id}")
async def get_post(post_id: str, service: BlogService = Depends(get_blog_service)) -> dict[str, Any]:
    try:
        return service.get_post(post_id).as_dict()
    except BlogError as exc:
        raise _to_http_error(exc) from exc


@app.post("/api/posts", status_code=201)
async def create_post(
    payload: PostCreateRequest,
    service: BlogService = Depends(get_blog_service),
) -> dict[str, Any]:
    try:
        post = service.create_post(
            title=payload.title,
            content=payload.content,
            published=payload.published,
            category_ids=payload.category_ids,
            meta_description=payload.meta_description,
            seo_keywords=payload.seo_keywords,
            scheduled_for=payload.scheduled_for,
        )
    except BlogError as exc:
        raise _to_http_error(exc) from exc
    except ValueError as exc:
        raise _invalid(exc) from exc

    logger.info("Post created", extra={"event": "post.create", "post_id": post.id})
    return post.as_dict()


@app.patch("/api/posts/{post_id}")
async def update_post(
    post_id: str,
    payload: PostUpdateRequest,
    service: BlogService = Depends(get_blog_service),
) -> dict[str, Any]:
    try:
        return service.update_post(post_id, payload.to_changes()).as_dict()
    except BlogError as exc:
        raise _to_http_error(exc) from exc
    except ValueError as exc:
        raise _invalid(exc) from exc


@app.delete("/api/posts/{post_id}")
async def delete_post(post_id: str, service: BlogService = Depends(get_blog_service)) -> dict[str, Any]:
    try:
        service.delete_post(post_id)
    except BlogError as exc:
        raise _to_http_error(exc) from exc
    return {"success": True}


@app.post("/api/posts/{post_id}/toggle-publish")
async def toggle_publish(post_id: str, service: BlogService = Depends(get_blog_service)) -> dict[str, Any]:
    try:
        return service.toggle_publish(post_id).as_dict()
    except BlogError as exc:
        raise _to_http_error(exc) from exc


@app.post("/api/posts/bulk/status")
async def bulk_update_status(
    payload: BulkStatusRequest,
    service: BlogService = Depends(get_blog_service),
) -> dict[str, Any]:
    updated = service.bulk_update_status(payload.post_ids, payload.published)
    return {"success": True, "updatedCount": updated}


@app.post("/api/posts/bulk/delete")
async def bulk_delete(
    payload: BulkDeleteRequest,
    service: BlogService = Depends(get_blog_service),
) -> dict[str, Any]:
    deleted = service.bulk_delete(payload.post_ids)
    return {"success": True, "deletedCount": deleted}


@app.post("/api/posts/bulk/categories")
async def bulk_assign_categories(
    payload: BulkCategoriesRequest,
    service: BlogService = Depends(get_blog_service),
) -> dict[str, Any]:
    updated = service.bulk_assign_categories(payload.post_ids, payload.category_ids, replace=payload.replace)
    return {"success": True, "updatedCount": updated}


@app.get("/api/categories")
async def list_categories(service: BlogService = Depends(get_blog_service)) -> list[dict[str, Any]]:
    return [category.as_dict() for category in service.list_categories()]


@app.get("/api/categories/popular")
async def popular_categories(
    limit: int = Query(default=10, ge=1, le=20),
    service: BlogService = Depends(get_blog_service),
) -> list[dict[str, Any]]:
    """Return categories ordered by how many posts they hold."""

    return [category.as_dict() for category in service.popular_categories(limit)]


@app.get("/api/categories/slug/{slug}/posts")
async def category_posts(
    slug: str,
    published: bool | None = True,
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: BlogService = Depends(get_blog_service),
) -> dict[str, Any]:
    """Return a category together with its posts."""

    try:
        category, posts = service.posts_by_category(slug, published=published, limit=limit, offset=offset)
    except BlogError as exc:
        raise _to_http_error(exc) from exc
    return {"category": category.as_dict(), "posts": [_post_summary(post) for post in posts]}


@app.get("/api/categories/{category_id}")
async def get_category(category_id: str, service: BlogService = Depends(get_blog_service)) -> dict[str, Any]:
    try:
        return service.get_category(category_id).as_dict()
    except BlogError as exc:
        raise _to_http_error(exc) from exc


@app.post("/api/categories", status_code=201)
async def create_category(
    payload: CategoryCreateRequest,
    service: BlogService = Depends(get_blog_service),
) -> dict[str, Any]:
    try:
        category = service.create_category(name=payload.name, description=payload.description)
    except BlogError as exc:
        raise _to_http_error(exc) from exc
    except ValueError as exc:
        raise _invalid(exc) from exc
    return category.as_dict()


@app.patch("/api/categories/{category_id}")
async def update_category(
    category_id: str,
    payload: CategoryUpdateRequest,
    service: BlogService = Depends(get_blog_service),
) -> dict[str, Any]:
    try:
        category = service.update_category(category_id, name=payload.name, description=payload.description)
    except BlogError as exc:
        raise _to_http_error(exc) from exc
    except ValueError as exc:
        raise _invalid(exc) from exc
    return category.as_dict()


@app.delete("/api/categories/{category_id}")
async def delete_category(category_id: str, service: BlogService = Depends(get_blog_service)) -> dict[str, Any]:
    try:
        service.delete_category(category_id)
    except BlogError as exc:
        raise _to_http_error(exc) from exc
    return {"success": True}


# AI endpoints are sync so the blocking model call runs in the threadpool.


@app.post("/api/ai/titles", response_model=TitleSuggestionsResponse, response_model_by_alias=True)
def ai_title_suggestions(
    payload: ContentRequest,
    assistant: AIContentService = Depends(get_ai_service),
) -> TitleSuggestionsResponse:
    logger.info("Title suggestions requested", extra={"event": "ai.titles", "content_length": len(payload.content)})
    return TitleSuggestionsResponse(
        suggestions=assistant.generate_title_suggestions(payload.content),
        ai_available=assistant.available,
    )


@app.post("/api/ai/keywords", response_model=KeywordsResponse, response_model_by_alias=True)
def ai_keywords(
    payload: DraftRequest,
    assistant: AIContentService = Depends(get_ai_service),
) -> KeywordsResponse:
    logger.info("SEO keywords requested", extra={"event": "ai.keywords", "content_length": len(payload.content)})
    return KeywordsResponse(
        keywords=assistant.generate_seo_keywords(payload.title, payload.content),
        ai_available=assistant.available,
    )


@app.post("/api/ai/meta-description", response_model=MetaDescriptionResponse, response_model_by_alias=True)
def ai_meta_description(
    payload: DraftRequest,
    assistant: AIContentService = Depends(get_ai_service),
) -> MetaDescriptionResponse:
    logger.info("Meta description requested", extra={"event": "ai.meta", "content_length": len(payload.content)})
    return MetaDescriptionResponse(
        meta_description=assistant.generate_meta_description(payload.title, payload.content),
        ai_available=assistant.available,
    )


@app.post("/api/ai/categories", response_model=CategorySuggestionsResponse, response_model_by_alias=True)
def ai_categories(
    payload: DraftRequest,
    assistant: AIContentService = Depends(get_ai_service),
    service: BlogService = Depends(get_blog_service),
) -> CategorySuggestionsResponse:
    existing = service.list_categories()
    by_name = {category.name.lower(): category for category in existing}
    matched: list[CategorySuggestion] = []
    for name in assistant.suggest_categories(payload.title, payload.content, existing):
        category = by_name.get(name.lower())
        if category is not None:
            matched.append(CategorySuggestion(id=category.id, name=category.name, slug=category.slug))
    return CategorySuggestionsResponse(suggestions=matched, ai_available=assistant.available)


@app.post("/api/ai/optimize", response_model=OptimizationResponse, response_model_by_alias=True)
def ai_optimize(
    payload: OptimizeRequest,
    assistant: AIContentService = Depends(get_ai_service),
) -> OptimizationResponse:
    logger.info("Content optimization requested", extra={"event": "ai.optimize", "content_length": len(payload.content)})
    report = assistant.optimize_content(payload.content)
    return OptimizationResponse(
        suggestions=report.suggestions,
        improvements=report.improvements,
        readability_score=report.readability_score,
        ai_available=assistant.available,
    )
