"""builddoctor - CI/CD build log analyzer."""

from builddoctor.models import BuildStep, LogAnalysis, StepStatus
from builddoctor.parser import parse
from builddoctor.patterns import LogFormat

__all__ = ["BuildStep", "LogAnalysis", "LogFormat", "StepStatus", "parse"]
