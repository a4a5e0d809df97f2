
"""
Core extraction engine.

Takes raw CI log text → splits lines → runs one format strategy →
scans timestamps → returns an immutable LogAnalysis.
"""

import logging

from builddoctor.models import LogAnalysis
from builddoctor.patterns import LINE_BREAK, LogFormat
from builddoctor.strategies import get_strategy
from builddoctor.timestamps import calculate_total_duration

logger = logging.getLogger(__name__)


def split_lines(content: str) -> list[str]:
    return LINE_BREAK.split(content)


def parse(content: str | bytes, format_key: str | None = "generic") -> LogAnalysis:
    """
    Extract build steps, errors, warnings and duration from a log.

    Args:
        content: Raw log text. Bytes are decoded as UTF-8, with undecodable
            sequences replaced.
        format_key: "github-actions", "jenkins" or "teamcity", any case.
            Anything else selects the generic heuristics.

    Returns:
        LogAnalysis. Never raises for any input.
    """
    if isinstance(content, (bytes, bytearray)):
        content = bytes(content).decode("utf-8", errors="replace")

    log_format = LogFormat.from_key(format_key)
    lines = split_lines(content)
    logger.debug("Parsing %d line(s) as %s", len(lines), log_format.value)

    extraction = get_strategy(log_format).extract(lines)

    analysis = LogAnalysis(
        steps=tuple(extraction.steps),
        errors=tuple(extraction.errors),
        warnings=tuple(extraction.warnings),
        total_duration=calculate_total_duration(content),
    )
    logger.debug(
        "Found %d step(s), %d failed, %d error(s), %d warning(s)",
        analysis.total_steps, analysis.failed_steps,
        len(analysis.errors), len(analysis.warnings),
    )
    return analysis
