"""builddoctor CLI - CI/CD build log analyzer."""

import json
import logging
import sys

import click

from builddoctor.config import load_settings


def get_settings():
    """Load settings, turning a malformed environment into a usage error."""
    try:
        return load_settings()
    except ValueError as exc:
        raise click.UsageError(f"Invalid environment configuration: {exc}")


def get_token(token):
    """Resolve GitHub token from option or environment."""
    token = token or get_settings().github_token
    if not token:
        raise click.ClickException(
            "GitHub token required. Pass --token or set GITHUB_TOKEN env var."
        )
    return token


def get_api_key(api_key):
    """Resolve the AI API key from option or environment."""
    api_key = api_key or get_settings().openai_api_key
    if not api_key:
        raise click.ClickException(
            "API key required for --ai. Pass --api-key or set OPENAI_API_KEY env var."
        )
    return api_key


def run_ai(analysis, api_key):
    """Ask the model for a root cause. Failures are reported, never fatal."""
    from builddoctor.ai import AIAnalysisError, OpenAIClient

    settings = get_settings()
    client = OpenAIClient(
        get_api_key(api_key),
        model=settings.ai_model,
        base_url=settings.ai_base_url,
        timeout=settings.http_timeout,
    )
    try:
        return client.analyze_log(analysis)
    except AIAnalysisError as exc:
        click.secho(f"Warning: {exc}", fg="yellow", err=True)
        return None


def emit(analysis, output, ai=None, check=False):
    """Print the analysis and apply --check."""
    from builddoctor.formatter import build_response, format_analysis

    if output == "json":
        click.echo(json.dumps(build_response(analysis, ai), indent=2))
    else:
        click.echo(format_analysis(analysis, ai))

    if check and analysis.has_failures:
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose):
    """builddoctor - CI/CD build log analyzer."""
    level = logging.getLevelName("DEBUG" if verbose else get_settings().log_level)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.argument(
    "log_file",
    default="-",
    type=click.File("r", encoding="utf-8", errors="replace"),
)
@click.option(
    "--format", "-f", "log_type",
    default="generic",
    help="Log format (github-actions, jenkins, teamcity, generic).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option("--ai", "use_ai", is_flag=True, help="Add an AI root-cause analysis.")
@click.option("--api-key", default=None, help="AI API key (or set OPENAI_API_KEY env var).")
@click.option("--check", is_flag=True, help="Exit 1 if any step failed.")
def analyze(log_file, log_type, output, use_ai, api_key, check):
    """Analyze a build log file (or stdin).

    \b
    Examples:
        builddoctor analyze build.log
        builddoctor analyze console.txt -f jenkins -o json
        cat build.log | builddoctor analyze --check
    """
    from builddoctor.parser import parse

    content = log_file.read()
    if not content.strip():
        raise click.UsageError("Log content cannot be empty")

    analysis = parse(content, log_type)
    ai = run_ai(analysis, api_key) if use_ai else None
    emit(analysis, output, ai=ai, check=check)


@cli.command()
def formats():
    """List recognized log formats."""
    from builddoctor.patterns import LogFormat

    for fmt in LogFormat:
        suffix = "  (default)" if fmt == LogFormat.GENERIC else ""
        click.echo(f"{fmt.value}{suffix}")


from builddoctor.cli.run_cmd import run_cmd

cli.add_command(run_cmd)
