"""
Human-readable and JSON output for a LogAnalysis.
Kept separate from the parser so the engine never depends on presentation.
"""

from builddoctor.ai import AIAnalysis
from builddoctor.models import LogAnalysis


_STATUS_ICON = {
    "success": "✅",
    "failed":  "❌",
}


def build_status(analysis: LogAnalysis) -> str:
    return "failed" if analysis.has_failures else "success"


def generate_summary(analysis: LogAnalysis) -> str:
    """One-paragraph digest of the counts, e.g. for a PR comment."""
    parts = [f"Analyzed {analysis.total_steps} build steps."]

    if analysis.failed_steps > 0:
        parts.append(f"{analysis.failed_steps} step(s) failed.")
    else:
        parts.append("All steps completed successfully.")

    if analysis.errors:
        parts.append(f"Found {len(analysis.errors)} error(s).")

    if analysis.warnings:
        parts.append(f"Found {len(analysis.warnings)} warning(s).")

    if analysis.total_duration is not None:
        # int() truncates toward zero, so -1500 ms reads as -1s
        seconds = int(analysis.total_duration / 1000)
        parts.append(f"Total duration: {seconds}s.")

    return " ".join(parts)


def build_response(analysis: LogAnalysis, ai: AIAnalysis | None = None) -> dict:
    """JSON payload: the parser output plus summary, with AI fields beside it."""
    return {
        "status": build_status(analysis),
        "analysis": analysis.to_dict(),
        "summary": generate_summary(analysis),
        "ai_analysis": ai.to_dict() if ai else None,
    }


def format_analysis(analysis: LogAnalysis, ai: AIAnalysis | None = None) -> str:
    """Format a LogAnalysis into a readable terminal report."""
    lines: list[str] = []
    lines.append("=" * 60)
    lines.append("  BUILD LOG ANALYSIS")
    lines.append("=" * 60)
    if analysis.has_failures:
        lines.append("❌ BUILD FAILED")
    else:
        lines.append("✅ BUILD SUCCEEDED")
    lines.append(f"  {generate_summary(analysis)}")
    lines.append("")

    def _section(title: str, items: list[str]):
        if not items:
            return
        lines.append(f"── {title} ({len(items)}) {'─' * (40 - len(title))}")
        lines.extend(items)
        lines.append("")

    step_lines = []
    for i, step in enumerate(analysis.steps, 1):
        icon = _STATUS_ICON.get(step.status.value, "⚪")
        where = f" (line {step.line_number})" if step.line_number else ""
        step_lines.append(f"  {i}. {icon} {step.name}{where}")
        if step.error_message:
            step_lines.append(f"     Error: {step.error_message}")

    _section("STEPS", step_lines)
    _section("ERRORS", [f"  - {e}" for e in analysis.errors])
    _section("WARNINGS", [f"  - {w}" for w in analysis.warnings])

    if ai:
        lines.append(f"── AI ANALYSIS {'─' * 35}")
        lines.append(f"  Root cause: {ai.root_cause}")
        lines.append("  Recommendations:")
        for rec in ai.recommendations.splitlines():
            lines.append(f"    {rec.strip()}")
        lines.append(f"  Impact: {ai.impact}")
        lines.append("")

    lines.append("=" * 60)
    return "\n".join(lines)
