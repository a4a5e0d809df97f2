
"""
Format strategies turn a log's lines into steps, errors and warnings.

Each CI system gets its own strategy. Add new formats by subclassing
FormatStrategy and registering the class in STRATEGIES.

Strategies hold no state: every extract() call works on its own
Extraction, so one instance can serve concurrent callers.
"""

from dataclasses import dataclass, field, replace

from builddoctor.models import BuildStep, StepStatus
from builddoctor.patterns import (
    FALLBACK_STEP_NAME,
    GENERIC_ERROR,
    GENERIC_STEP_KEYWORDS,
    GENERIC_STEP_PREFIXES,
    GENERIC_WARNING,
    GHA_ERROR,
    GHA_GROUP,
    GHA_LOOKAHEAD,
    GHA_WARNING,
    JENKINS_ERROR,
    JENKINS_STEP,
    TEAMCITY_BLOCK_OPENED,
    TEAMCITY_ERROR,
    LogFormat,
)


@dataclass
class Extraction:
    """Call-local accumulators filled by a strategy."""
    steps: list[BuildStep] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def fail_last_step(self, message: str) -> None:
        """Swap the most recent step for a failed copy. No-op without steps."""
        if self.steps:
            self.steps[-1] = replace(
                self.steps[-1],
                status=StepStatus.FAILED,
                error_message=message,
            )


class FormatStrategy:
    """Base strategy. Recognizes nothing; override extract()."""

    def extract(self, lines: list[str]) -> Extraction:
        return Extraction()


class GitHubActionsStrategy(FormatStrategy):
    """``##[group]`` / ``##[error]`` / ``##[warning]`` workflow commands."""

    def extract(self, lines: list[str]) -> Extraction:
        out = Extraction()

        for i, line in enumerate(lines):
            m = GHA_GROUP.search(line)
            if m:
                # Outcome is decided once, from the group line plus the next 9
                window = lines[i:i + GHA_LOOKAHEAD]
                has_error = any(GHA_ERROR.search(l) for l in window)
                out.steps.append(BuildStep(
                    name=m.group(1).strip(),
                    status=StepStatus.FAILED if has_error else StepStatus.SUCCESS,
                    line_number=i + 1,
                ))

            m = GHA_ERROR.search(line)
            if m:
                out.errors.append(m.group(1).strip())

            m = GHA_WARNING.search(line)
            if m:
                out.warnings.append(m.group(1).strip())

        return out


class JenkinsStrategy(FormatStrategy):
    """``[Pipeline] stage`` markers; ``ERROR:`` fails the current stage."""

    def extract(self, lines: list[str]) -> Extraction:
        out = Extraction()

        for i, line in enumerate(lines):
            m = JENKINS_STEP.search(line)
            if m:
                out.steps.append(BuildStep(
                    name=m.group(1).strip(),
                    line_number=i + 1,
                ))

            m = JENKINS_ERROR.search(line)
            if m:
                message = m.group(1).strip()
                out.errors.append(message)
                out.fail_last_step(message)

        return out


class TeamCityStrategy(FormatStrategy):
    """
    ``##teamcity[...]`` service messages.

    Names and messages are kept verbatim. ERROR messages are recorded but
    never change a block's status.
    """

    def extract(self, lines: list[str]) -> Extraction:
        out = Extraction()

        for i, line in enumerate(lines):
            m = TEAMCITY_BLOCK_OPENED.search(line)
            if m:
                out.steps.append(BuildStep(name=m.group(1), line_number=i + 1))

            m = TEAMCITY_ERROR.search(line)
            if m:
                out.errors.append(m.group(1))

        return out


class GenericStrategy(FormatStrategy):
    """Heuristics for logs from any other tool."""

    @staticmethod
    def is_step_boundary(line: str) -> bool:
        lowered = line.lower()
        return (
            any(k in lowered for k in GENERIC_STEP_KEYWORDS)
            or line.startswith(GENERIC_STEP_PREFIXES)
        )

    def extract(self, lines: list[str]) -> Extraction:
        out = Extraction()

        for i, line in enumerate(lines):
            if self.is_step_boundary(line):
                out.steps.append(BuildStep(name=line.strip(), line_number=i + 1))

            m = GENERIC_ERROR.search(line)
            if m:
                message = m.group(2).strip()
                out.errors.append(message)
                out.fail_last_step(message)

            m = GENERIC_WARNING.search(line)
            if m:
                out.warnings.append(m.group(2).strip())

        # Signals but no step boundary: report them under one placeholder step
        if not out.steps and (out.errors or out.warnings):
            out.steps.append(BuildStep(
                name=FALLBACK_STEP_NAME,
                status=StepStatus.FAILED if out.errors else StepStatus.SUCCESS,
                error_message=out.errors[0] if out.errors else None,
            ))

        return out


# Registry of strategies, extend as you add CI systems
STRATEGIES: dict[LogFormat, type[FormatStrategy]] = {
    LogFormat.GITHUB_ACTIONS: GitHubActionsStrategy,
    LogFormat.JENKINS: JenkinsStrategy,
    LogFormat.TEAMCITY: TeamCityStrategy,
    LogFormat.GENERIC: GenericStrategy,
}


def get_strategy(log_format: LogFormat = LogFormat.GENERIC) -> FormatStrategy:
    cls = STRATEGIES.get(log_format, GenericStrategy)
    return cls()
