"""Readability scoring and improvement advice for post bodies."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from inkwell.models.assistant import LLMSuccess, OptimizationReport
from inkwell.services.llm import LLMInvoker
from inkwell.services.parsers import parse_optimization_report

LOGGER = logging.getLogger(__name__)

OPTIMIZE_EXCERPT_LENGTH = 2000

OPTIMIZE_PROMPT = """
Analyze this blog post content and provide:
1. 3 suggestions for improvement
2. 2 readability improvements
3. A readability score from 1-10 (10 being most readable)

Format your response as:
SUGGESTIONS:
- suggestion 1
- suggestion 2
- suggestion 3

IMPROVEMENTS:
- improvement 1
- improvement 2

SCORE: X

Content: {content}
""".strip()


def default_report() -> OptimizationReport:
    return OptimizationReport(suggestions=[], improvements=[])


@dataclass(slots=True)
class ContentOptimizer:
    """Ask the model to grade a post body, degrading to a neutral report."""

    invoker: LLMInvoker

    def optimize(self, content: str) -> OptimizationReport:
        request = OPTIMIZE_PROMPT.format(content=(content or "")[:OPTIMIZE_EXCERPT_LENGTH])
        result = self.invoker.complete(request, operation="optimize_content")
        if not isinstance(result, LLMSuccess):
            return default_report()

        report = parse_optimization_report(result.text)
        LOGGER.debug(
            "Parsed optimization report with %d suggestions, %d improvements, score %d",
            len(report.suggestions),
            len(report.improvements),
            report.readability_score,
        )
        return report


__all__ = ["ContentOptimizer", "OPTIMIZE_PROMPT", "default_report"]
