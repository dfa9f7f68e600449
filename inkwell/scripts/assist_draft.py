"""Run the writing assistant over a Markdown draft and print the suggestions as JSON.

Example::

    python -m inkwell.scripts.assist_draft drafts/my-post.md --title "Working title"

Without ``GOOGLE_GEMINI_API_KEY`` (or with ``INKWELL_AI_ENABLED=false``) every
answer comes from the local heuristics, so the script also works offline.
"""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from inkwell.config import configure_logging, load_settings
from inkwell.models.assistant import CategorySource, ContentDraft
from inkwell.services.assistant import AIContentService
from inkwell.services.sqlite_repo import LocalSQLiteBlogRepository

LOGGER = logging.getLogger("inkwell.assist")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Suggest titles, keywords and more for a Markdown draft.")
    parser.add_argument("path", type=Path, help="Markdown file containing the draft body.")
    parser.add_argument("--title", default="", help="Working title (defaults to the first heading).")
    parser.add_argument(
        "--with-categories",
        action="store_true",
        help="Also suggest categories from the configured database.",
    )
    return parser.parse_args(argv)


def _guess_title(body: str) -> str:
    for line in body.splitlines():
        stripped = line.strip()
        if stripped.startswith("#"):
            return stripped.lstrip("#").strip()
    return ""


def build_report(
    service: AIContentService,
    draft: ContentDraft,
    categories: CategorySource | None = None,
) -> dict[str, object]:
    """Collect every assistant answer for ``draft`` into one mapping."""

    report: dict[str, object] = {
        "aiAvailable": service.available,
        "titles": service.generate_title_suggestions(draft.body),
        "keywords": service.generate_seo_keywords(draft.title, draft.body),
        "metaDescription": service.generate_meta_description(draft.title, draft.body),
        "optimization": service.optimize_content(draft.body).as_dict(),
    }
    if categories is not None:
        report["categories"] = service.suggest_categories(draft.title, draft.body, categories.list_categories())
    return report


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = load_settings()
    configure_logging(settings)

    try:
        body = args.path.read_text(encoding="utf-8")
    except OSError as exc:
        LOGGER.error("Could not read %s: %s", args.path, exc)
        return 1

    draft = ContentDraft(title=args.title.strip() or _guess_title(body), body=body)
    service = AIContentService(settings)

    if args.with_categories:
        repository = LocalSQLiteBlogRepository(db_path=settings.db_path)
        try:
            report = build_report(service, draft, repository)
        finally:
            repository.close()
    else:
        report = build_report(service, draft)

    print(json.dumps(report, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
