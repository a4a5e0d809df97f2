"""CLI command: builddoctor run. Fetch a GitHub Actions run's logs and analyze them."""

from __future__ import annotations

import click

from builddoctor.github import fetch_run_logs
from builddoctor.parser import parse


@click.command("run")
@click.argument("run_id")
@click.option("--repo", "-r", required=True, help="GitHub repo (owner/repo).")
@click.option("--token", "-t", default=None, help="GitHub token (or set GITHUB_TOKEN env var).")
@click.option(
    "--format", "-f", "log_type",
    default="github-actions",
    help="Log format used to parse the downloaded logs.",
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
def run_cmd(
    run_id: str,
    repo: str,
    token: str | None,
    log_type: str,
    output: str,
    use_ai: bool,
    api_key: str | None,
    check: bool,
) -> None:
    """Fetch logs for a workflow run and analyze them.

    \b
    Examples:
        builddoctor run 12345 -r owner/repo
        builddoctor run 12345 -r owner/repo -o json --ai
    """
    from builddoctor.cli import emit, get_settings, get_token, run_ai

    token = get_token(token)

    if output != "json":
        click.echo(f"Fetching logs for run {run_id} in {repo}...", err=True)
    log_files = fetch_run_logs(repo, run_id, token, timeout=get_settings().http_timeout)

    # Combine all log file contents into one log for parsing
    raw_log = "\n".join(content for _, content in log_files)
    if not raw_log.strip():
        raise click.ClickException(f"Run {run_id} has no log output.")

    analysis = parse(raw_log, log_type)
    ai = run_ai(analysis, api_key) if use_ai else None
    emit(analysis, output, ai=ai, check=check)
