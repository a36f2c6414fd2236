"""Tests for output reporters."""

import io
import json

from rich.console import Console

from commitgate.checks.builtin.binary import BinaryCheck
from commitgate.checks.issues import format_size
from commitgate.engine.models import CheckReport
from commitgate.engine.runner import run
from commitgate.output import json_report, terminal
from commitgate.vcs.message import parse_message
from commitgate.vcs.models import Status


def _report(conf, make_commit, binary_diff, size=9) -> CheckReport:
    commit = make_commit([binary_diff("file.bin", Status.added(), size)])
    from commitgate.checks.registry import build_registry

    return run(commit, parse_message(commit), conf, build_registry())


class TestFormatSize:
    def test_units(self):
        assert format_size(1) == "1b"
        assert format_size(1024) == "1k"
        assert format_size(1536) == "1536b"
        assert format_size(3 * 1024 * 1024) == "3m"


class TestJsonReport:
    def test_valid_json(self, conf, make_commit, binary_diff):
        report = _report(conf, make_commit, binary_diff)
        data = json.loads(json_report.render([report]))
        assert data["version"] == "1.0"
        assert data["total_issues"] == 1
        assert data["blocked"] is True
        assert data["commits"] == [report.commit.hash.hex]

    def test_issue_fields(self, conf, make_commit, binary_diff):
        report = _report(conf, make_commit, binary_diff)
        (issue,) = json_report.to_dict([report])["issues"]
        assert issue["check"] == BinaryCheck.name
        assert issue["severity"] == "error"
        assert issue["path"] == "file.bin"
        assert issue["file_size"] == 9
        assert issue["limited_file_size"] == 1
        assert "file.bin" in issue["description"]

    def test_empty(self):
        data = json_report.to_dict([])
        assert data["total_issues"] == 0
        assert data["blocked"] is False
        assert data["issues"] == []


class TestTerminal:
    def _render(self, reports) -> str:
        buf = io.StringIO()
        terminal.render(reports, console=Console(file=buf, width=200, color_system=None))
        return buf.getvalue()

    def test_issues_table(self, conf, make_commit, binary_diff):
        out = self._render([_report(conf, make_commit, binary_diff)])
        assert "file.bin" in out
        assert "ERROR" in out
        assert "BLOCKED" in out

    def test_clean(self, conf, make_commit, binary_diff):
        out = self._render([_report(conf, make_commit, binary_diff, size=1)])
        assert "No issues found" in out
        assert "Commits checked" in out
