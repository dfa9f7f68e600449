"""Upstream access to the generative model, expressed as explicit results."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from google.api_core.exceptions import DeadlineExceeded
from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from inkwell.config import Settings
from inkwell.models.assistant import LLMFailure, LLMResult, LLMSuccess

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are the writing assistant of Inkwell, a blogging platform. "
    "Help authors polish their drafts with concise, accurate and search-friendly copy. "
    "Follow the requested output format exactly and do not add commentary."
)


class SupportsInvoke(Protocol):
    """Protocol describing the subset of LangChain interfaces we rely on."""

    def invoke(self, input: Any, **kwargs: Any) -> BaseMessage | str:
        """Invoke the underlying language model."""


def _default_prompt() -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", SYSTEM_PROMPT),
            ("human", "{request}"),
        ]
    )


def create_content_llm(settings: Settings) -> SupportsInvoke:
    """Construct the Gemini chat model described by ``settings``."""

    from langchain_google_genai import ChatGoogleGenerativeAI

    return ChatGoogleGenerativeAI(
        model=settings.ai_model,
        google_api_key=settings.gemini_api_key,
        temperature=settings.ai_temperature,
        timeout=settings.ai_timeout,
        max_retries=0,
    )


def extract_text(response: Any) -> str:
    """Return the textual payload of a LangChain message or plain reply."""

    if response is None:
        return ""
    if isinstance(response, str):
        return response
    if hasattr(response, "content"):
        content = response.content
        if isinstance(content, list):
            parts: list[str] = []
            for part in content:
                if isinstance(part, dict):
                    parts.append(str(part.get("text", "")))
                else:
                    parts.append(str(part))
            return "".join(parts)
        return str(content or "")
    if isinstance(response, dict) and "content" in response:
        return str(response["content"])
    return str(response)


@dataclass(slots=True)
class LLMInvoker:
    """Send a single prompt upstream and report the outcome without raising.

    ``available`` is fixed at construction. An unavailable invoker never
    touches the model.
    """

    llm: SupportsInvoke | None
    available: bool
    prompt: ChatPromptTemplate = field(default_factory=_default_prompt)

    def complete(self, request: str, *, operation: str) -> LLMResult:
        if not self.available or self.llm is None:
            LOGGER.debug("AI unavailable for %s; using fallback", operation)
            return LLMFailure("unavailable")

        messages = self.prompt.format_messages(request=request)
        try:
            response = self.llm.invoke(messages)
        except (TimeoutError, DeadlineExceeded) as exc:
            LOGGER.error("AI request for %s timed out: %s", operation, exc)
            return LLMFailure("timeout", str(exc))
        except Exception as exc:
            LOGGER.exception("AI request for %s failed", operation)
            return LLMFailure("upstream", str(exc) or type(exc).__name__)

        text = extract_text(response).strip()
        if not text:
            LOGGER.warning("AI request for %s returned an empty response", operation)
            return LLMFailure("empty")
        return LLMSuccess(text)


__all__ = [
    "LLMInvoker",
    "SYSTEM_PROMPT",
    "SupportsInvoke",
    "create_content_llm",
    "extract_text",
]
