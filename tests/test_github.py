"""Tests for the GitHub Actions log fetcher."""

import io
import zipfile
from unittest.mock import MagicMock, patch

import click
import pytest
import requests

from builddoctor import parse
from builddoctor.github import fetch_run_logs, get_headers, log_order, select_log_members


# A run with one job: the full job log at the root, the same lines split
# per step in the job's folder.
JOB_LOG = (
    "2024-01-15T10:30:00.0000000Z ##[group]Setup\n"
    "2024-01-15T10:30:01.0000000Z ok\n"
    + "2024-01-15T10:30:02.0000000Z ...\n" * 10
    + "2024-01-15T10:30:10.0000000Z ##[group]Test\n"
    "2024-01-15T10:30:11.0000000Z ##[error]boom\n"
)

RUN_ARCHIVE = {
    "0_build.txt": JOB_LOG,
    "build/2_Setup.txt": JOB_LOG.split("##[group]Test")[0],
    "build/10_Test.txt": "2024-01-15T10:30:10.0000000Z ##[group]Test\n"
                         "2024-01-15T10:30:11.0000000Z ##[error]boom\n",
    "build/system.txt": "runner metadata\n",
}


def _zip_bytes(members):
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in members.items():
            zf.writestr(name, data)
    return buf.getvalue()


def _response(status=200, content=b""):
    resp = MagicMock()
    resp.status_code = status
    resp.content = content
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status}")
    return resp


class TestSelectLogMembers:
    def test_root_job_logs_win(self):
        names = ["build/2_Setup.txt", "0_build.txt", "build/10_Test.txt", "1_lint.txt"]
        assert select_log_members(names) == ["0_build.txt", "1_lint.txt"]

    def test_step_files_in_numeric_order(self):
        names = ["build/10_Test.txt", "build/2_Setup.txt", "build/1_Set up job.txt"]
        assert select_log_members(names) == [
            "build/1_Set up job.txt", "build/2_Setup.txt", "build/10_Test.txt",
        ]

    def test_non_txt_members_ignored(self):
        assert select_log_members(["build/", "build/meta.json"]) == []

    def test_log_order_unprefixed_last(self):
        assert log_order("build/system.txt") > log_order("build/99_Cleanup.txt")


class TestFetchRunLogs:
    @patch("builddoctor.github.requests.get")
    def test_realistic_archive_read_once(self, mock_get):
        mock_get.return_value = _response(content=_zip_bytes(RUN_ARCHIVE))
        logs = fetch_run_logs("owner/repo", "42", "tok")

        assert [name for name, _ in logs] == ["0_build.txt"]
        url = mock_get.call_args[0][0]
        assert url == "https://api.github.com/repos/owner/repo/actions/runs/42/logs"

    @patch("builddoctor.github.requests.get")
    def test_realistic_archive_parses_each_step_once(self, mock_get):
        mock_get.return_value = _response(content=_zip_bytes(RUN_ARCHIVE))
        logs = fetch_run_logs("owner/repo", "42", "tok")
        result = parse("\n".join(content for _, content in logs), "github-actions")

        assert [s.name for s in result.steps] == ["Setup", "Test"]
        assert result.errors == ("boom",)
        assert result.total_steps == 2
        assert result.failed_steps == 1

    @patch("builddoctor.github.requests.get")
    def test_step_only_archive_keeps_run_order(self, mock_get):
        mock_get.return_value = _response(content=_zip_bytes({
            "build/10_Test.txt": "##[group]Test\n",
            "build/2_Setup.txt": b"##[group]Setup\n\xff",
            "build/meta.json": "{}",
        }))
        logs = fetch_run_logs("owner/repo", "42", "tok")

        assert [name for name, _ in logs] == ["build/2_Setup.txt", "build/10_Test.txt"]
        assert logs[0][1] == "##[group]Setup\n\ufffd"

    @patch("builddoctor.github.requests.get")
    def test_not_found(self, mock_get):
        mock_get.return_value = _response(status=404)
        with pytest.raises(click.ClickException, match="not found"):
            fetch_run_logs("owner/repo", "42", "tok")

    @patch("builddoctor.github.requests.get")
    def test_other_http_errors_propagate(self, mock_get):
        mock_get.return_value = _response(status=500)
        with pytest.raises(requests.HTTPError):
            fetch_run_logs("owner/repo", "42", "tok")

    def test_headers(self):
        headers = get_headers("tok")
        assert headers["Authorization"] == "Bearer tok"
        assert headers["Accept"] == "application/vnd.github+json"
