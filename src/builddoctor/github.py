"""
GitHub Actions run-log download.

A run's log archive repeats every line: each job's full log sits at the
archive root (``0_build.txt``) and again split per step under a folder
named after the job (``build/1_Set up job.txt``). Only one copy is read,
ordered by the numeric prefix so the lines keep their run order.
"""

import io
import logging
import re
import sys
import zipfile

import click
import requests

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"

_ORDER_PREFIX = re.compile(r"(\d+)_")


def get_headers(token):
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def log_order(name):
    """Sort key: folder, then numeric prefix (2_ before 10_), then name."""
    folder, _, base = name.rpartition("/")
    m = _ORDER_PREFIX.match(base)
    return (folder, int(m.group(1)) if m else sys.maxsize, base)


def select_log_members(names):
    """Pick one copy of the run's output from the archive member names.

    Root-level job logs win. Archives without them fall back to the
    per-step files.
    """
    logs = [n for n in names if n.endswith(".txt")]
    jobs = [n for n in logs if "/" not in n]
    return sorted(jobs or logs, key=log_order)


def fetch_run_logs(repo, run_id, token, timeout=30.0):
    """Download and extract workflow run logs from GitHub Actions.

    Args:
        repo: "owner/repo" string
        run_id: Workflow run ID
        token: GitHub personal access token
        timeout: Request timeout in seconds

    Returns:
        List of (filename, content) tuples, one per job log, in run order.
    """
    url = f"{GITHUB_API}/repos/{repo}/actions/runs/{run_id}/logs"
    logger.debug("GET %s", url)
    resp = requests.get(url, headers=get_headers(token), allow_redirects=True, timeout=timeout)

    if resp.status_code == 404:
        raise click.ClickException(
            f"Run {run_id} not found in {repo}. "
            "Check the repo name and run ID, or ensure logs haven't expired."
        )
    resp.raise_for_status()

    logs = []
    with zipfile.ZipFile(io.BytesIO(resp.content)) as zf:
        for name in select_log_members(zf.namelist()):
            content = zf.read(name).decode("utf-8", errors="replace")
            logs.append((name, content))
    logger.debug("Extracted %d log file(s) for run %s", len(logs), run_id)
    return logs
