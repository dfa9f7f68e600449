"""Value objects exchanged with the AI writing assistant."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Protocol

DEFAULT_READABILITY_SCORE = 7
MIN_READABILITY_SCORE = 1
MAX_READABILITY_SCORE = 10

FailureKind = Literal["unavailable", "upstream", "timeout", "empty"]


@dataclass(slots=True, frozen=True)
class ContentDraft:
    """Title/body pair supplied by the editor for a single assistant call."""

    title: str = ""
    body: str = ""


@dataclass(slots=True, frozen=True)
class CategoryRef:
    """Minimal category view used when asking for category suggestions."""

    name: str
    slug: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "CategoryRef":
        return cls(name=str(data.get("name") or ""), slug=str(data.get("slug") or ""))


class CategorySource(Protocol):
    """Read-only access to the categories an author can choose from."""

    def list_categories(self) -> list:
        """Return the stored categories."""


@dataclass(slots=True)
class OptimizationReport:
    """Readability score plus improvement advice for a content body."""

    suggestions: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    readability_score: int = DEFAULT_READABILITY_SCORE

    def as_dict(self) -> dict[str, object]:
        return {
            "suggestions": list(self.suggestions),
            "improvements": list(self.improvements),
            "readabilityScore": self.readability_score,
        }


@dataclass(slots=True, frozen=True)
class LLMSuccess:
    """Text returned by the language model."""

    text: str


@dataclass(slots=True, frozen=True)
class LLMFailure:
    """Reason the language model produced no usable text."""

    kind: FailureKind
    message: str = ""


LLMResult = LLMSuccess | LLMFailure


__all__ = [
    "CategoryRef",
    "CategorySource",
    "ContentDraft",
    "DEFAULT_READABILITY_SCORE",
    "FailureKind",
    "LLMFailure",
    "LLMResult",
    "LLMSuccess",
    "MAX_READABILITY_SCORE",
    "MIN_READABILITY_SCORE",
    "OptimizationReport",
]
