"""AI-assisted root-cause analysis via an OpenAI-compatible chat API."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import requests

from builddoctor.models import LogAnalysis

logger = logging.getLogger(__name__)


DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_BASE_URL = "https://api.openai.com/v1"

MAX_PROMPT_ERRORS = 5
MAX_PROMPT_WARNINGS = 3

NO_ANALYSIS = "Unable to generate analysis"
DEFAULT_IMPACT = "Build failure preventing deployment"

SYSTEM_PROMPT = """You are an expert CI/CD engineer analyzing build failures.
Provide concise, actionable analysis in this format:

Root Cause: [1-2 sentence explanation of what caused the failure]

Recommendations:
- [Specific action 1]
- [Specific action 2]
- [Specific action 3]

Impact: [Brief description of how this affects the pipeline]

Keep responses focused and practical."""


class AIAnalysisError(Exception):
    """The chat API could not be reached or returned an unusable reply."""


@dataclass(frozen=True)
class AIAnalysis:
    root_cause: str
    recommendations: str
    impact: str

    def to_dict(self) -> dict:
        return {
            "root_cause": self.root_cause,
            "recommendations": self.recommendations,
            "impact": self.impact,
        }


# -- Prompt ----------------------------------------------------------------

def build_prompt(analysis: LogAnalysis) -> str:
    """Render a LogAnalysis as the user message for the model."""
    lines = [
        "Analyze this CI/CD build failure:",
        "",
        f"Build Status: {'FAILED' if analysis.has_failures else 'SUCCESS'}",
        f"Total Steps: {analysis.total_steps}",
        f"Failed Steps: {analysis.failed_steps}",
        "",
    ]

    if analysis.errors:
        lines.append("Errors Found:")
        lines.extend(f"- {e}" for e in analysis.errors[:MAX_PROMPT_ERRORS])
        if len(analysis.errors) > MAX_PROMPT_ERRORS:
            lines.append(f"... and {len(analysis.errors) - MAX_PROMPT_ERRORS} more errors")
        lines.append("")

    if analysis.warnings:
        lines.append("Warnings Found:")
        lines.extend(f"- {w}" for w in analysis.warnings[:MAX_PROMPT_WARNINGS])
        lines.append("")

    failed = [s for s in analysis.steps if s.failed]
    if failed:
        lines.append("Failed Steps:")
        for step in failed:
            lines.append(f"- {step.name}")
            if step.error_message:
                lines.append(f"  Error: {step.error_message}")

    return "\n".join(lines) + "\n"


# -- Reply parsing ---------------------------------------------------------

def extract_section(content: str, start_marker: str, end_marker: str | None) -> str:
    """Text from the line after ``start_marker`` up to ``end_marker``.

    Markers are matched case-insensitively. Returns "" when the start
    marker is missing or sits on the last line.
    """
    lower = content.lower()
    start_idx = lower.find(start_marker)
    if start_idx == -1:
        return ""

    start = content.find("\n", start_idx) + 1
    if start == 0:
        return ""

    end = len(content)
    if end_marker is not None:
        end_idx = lower.find(end_marker, start)
        if end_idx != -1:
            end = end_idx

    return content[start:end].strip()


def extract_bullet_points(content: str) -> str:
    bullets = [
        line for line in content.splitlines()
        if line.strip().startswith(("-", "•"))
    ]
    return "\n".join(bullets).strip()


def extract_inline(content: str, marker: str) -> str:
    """Text after the first ``:`` on the first line mentioning ``marker``."""
    for line in content.splitlines():
        if marker in line.lower():
            _, sep, rest = line.partition(":")
            return rest.strip() if sep else ""
    return ""


def parse_ai_response(content: str) -> AIAnalysis:
    """Split the model's free-text reply into root cause, recommendations, impact.

    Root cause and impact are read inline after their label's colon first,
    then from the lines below the label. So ``Impact: ...`` on the reply's
    last line is kept; a section-only read would drop it and return the
    default impact.
    """
    root_cause = extract_inline(content, "root cause")
    if not root_cause:
        root_cause = extract_section(content, "root cause", "recommendation")

    recommendations = extract_section(content, "recommendation", "impact")
    if not recommendations.strip():
        recommendations = extract_bullet_points(content)

    impact = extract_inline(content, "impact") or extract_section(content, "impact", None)
    if not impact.strip():
        impact = DEFAULT_IMPACT

    return AIAnalysis(
        root_cause=root_cause.strip(),
        recommendations=recommendations.strip(),
        impact=impact.strip(),
    )


# -- Client ----------------------------------------------------------------

class OpenAIClient:
    """Thin chat-completions client. One request per analyze_log() call."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.7,
            "max_tokens": 500,
        }

    def complete(self, prompt: str) -> str:
        """Send one prompt and return the first choice's text."""
        url = f"{self.base_url}/chat/completions"
        logger.debug("POST %s (model=%s)", url, self.model)
        try:
            resp = requests.post(
                url,
                headers=self._headers(),
                json=self._payload(prompt),
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise AIAnalysisError(f"AI request failed: {exc}") from exc

        # requests.JSONDecodeError is itself a RequestException
        try:
            body = resp.json()
        except requests.JSONDecodeError as exc:
            raise AIAnalysisError("AI response was not valid JSON") from exc

        if not isinstance(body, dict):
            raise AIAnalysisError("AI response was not a JSON object")

        choices = body.get("choices") or []
        if not choices:
            logger.warning("AI response contained no choices")
            return NO_ANALYSIS
        try:
            content = choices[0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise AIAnalysisError("AI response had an unexpected shape") from exc
        return content or NO_ANALYSIS

    def analyze_log(self, analysis: LogAnalysis) -> AIAnalysis:
        return parse_ai_response(self.complete(build_prompt(analysis)))
