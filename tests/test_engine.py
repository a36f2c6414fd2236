"""Tests for the check engine — severity mapping, dedup, laziness, fan-out."""

import dataclasses

import pytest

from commitgate.checks.base import CheckContext, CommitCheck
from commitgate.checks.builtin.binary import BinaryCheck
from commitgate.checks.issues import Issue
from commitgate.checks.registry import CheckRegistry, UnknownCheckError, build_registry
from commitgate.conf.schema import Configuration, Severity
from commitgate.engine.aggregator import apply_severity, deduplicate
from commitgate.engine.runner import CheckError, first_error, iter_issues, run, run_all
from commitgate.vcs.message import parse_message
from commitgate.vcs.models import Hash, Status


class ExplodingCheck(CommitCheck):
    """Yields one error, then fails if consumed further."""

    name = "exploding"

    def check(self, commit, message, configuration, context=None):
        yield Issue(commit=commit, message=message, check=self, severity=Severity.ERROR)
        raise RuntimeError("consumed past the first issue")


class ContextCheck(CommitCheck):
    name = "context"

    def check(self, commit, message, configuration, context=None):
        if context is not None and context.extras.get("flag"):
            yield Issue(commit=commit, message=message, check=self, severity=Severity.WARNING)


def _registry(*checks):
    registry = build_registry()
    registry.register_many(list(checks))
    return registry


class TestRegistry:
    def test_builtins_registered(self):
        registry = build_registry()
        assert registry.names == ["binary"]
        assert isinstance(registry.get("binary"), BinaryCheck)
        assert registry.get("whitespace") is None

    def test_enabled_in_configuration_order(self):
        registry = _registry(ContextCheck())
        conf = Configuration.parse(["[checks]", "error = context, binary"])
        assert [c.name for c in registry.enabled_checks(conf)] == ["context", "binary"]

    def test_disabled_when_not_listed(self, conf):
        registry = _registry(ContextCheck())
        assert [c.name for c in registry.enabled_checks(conf)] == ["binary"]

    def test_unknown_check(self):
        conf = Configuration.parse(["[checks]", "error = whitespace"])
        with pytest.raises(UnknownCheckError):
            build_registry().enabled_checks(conf)

    def test_unnamed_check_rejected(self):
        class Nameless(CommitCheck):
            def check(self, commit, message, configuration, context=None):
                return iter(())

        with pytest.raises(ValueError):
            CheckRegistry().register(Nameless())


class TestSeverity:
    def test_error_directive_keeps_error(self, conf, make_commit, binary_diff):
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        report = run(commit, parse_message(commit), conf, build_registry())
        assert [i.severity for i in report.issues] == [Severity.ERROR]
        assert report.blocked is True
        assert report.checks_run == ["binary"]

    def test_warning_directive_downgrades(self, make_commit, binary_diff):
        conf = Configuration.parse(["[checks]", "warning = binary", '[checks "binary"]', ".*=1"])
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        report = run(commit, parse_message(commit), conf, build_registry())
        assert [i.severity for i in report.issues] == [Severity.WARNING]
        assert report.blocked is False
        assert report.warnings == report.issues
        assert report.errors == []

    def test_apply_severity_unlisted_check_untouched(self, make_commit, binary_diff, conf):
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        issue = Issue(commit=commit, message=parse_message(commit), check=ContextCheck(), severity=Severity.WARNING)
        assert apply_severity(issue, conf) is issue

    def test_no_checks_enabled(self, make_commit, binary_diff):
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        report = run(commit, parse_message(commit), Configuration(), build_registry())
        assert report.total_issues == 0
        assert report.blocked is False


class TestDeduplication:
    def test_same_file_against_two_parents_reported_once(self, conf, make_commit, binary_diff):
        diffs = [binary_diff("file.bin", Status.modified(), 9), binary_diff("file.bin", Status.modified(), 9)]
        commit = make_commit(diffs, parents=[Hash("a" * 40), Hash("b" * 40)])
        message = parse_message(commit)
        assert len(list(iter_issues(commit, message, conf, build_registry()))) == 2
        assert run(commit, message, conf, build_registry()).total_issues == 1

    def test_first_occurrence_wins(self, conf, make_commit, binary_diff):
        diffs = [binary_diff("file.bin", Status.modified(), 9), binary_diff("file.bin", Status.modified(), 50)]
        commit = make_commit(diffs, parents=[Hash("a" * 40), Hash("b" * 40)])
        issues = list(BinaryCheck().check(commit, parse_message(commit), conf))
        assert [i.file_size for i in deduplicate(issues)] == [9]

    def test_issue_key(self, conf, make_commit, binary_diff):
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        (issue,) = BinaryCheck().check(commit, parse_message(commit), conf)
        assert issue.key == (commit.hash.hex, "binary", "file.bin")

    def test_issues_sort_by_commit_check_path(self, conf, make_commit, binary_diff):
        diffs = [binary_diff("b.bin", Status.modified(), 9), binary_diff("a.bin", Status.modified(), 9)]
        commit = make_commit(diffs, parents=[Hash("a" * 40), Hash("b" * 40)])
        issues = list(BinaryCheck().check(commit, parse_message(commit), conf))
        assert [i.path for i in issues] == ["b.bin", "a.bin"]
        assert [i.path for i in sorted(issues)] == ["a.bin", "b.bin"]
        assert issues[1] < issues[0]

    def test_issues_equal_by_key(self, conf, make_commit, binary_diff):
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        (issue,) = BinaryCheck().check(commit, parse_message(commit), conf)
        downgraded = dataclasses.replace(issue, severity=Severity.WARNING)
        assert downgraded == issue
        assert len({issue, downgraded}) == 1


class TestLaziness:
    def test_first_error_stops_early(self, make_commit, binary_diff):
        conf = Configuration.parse(["[checks]", "error = exploding"])
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        issue = first_error(commit, parse_message(commit), conf, _registry(ExplodingCheck()))
        assert issue is not None
        assert issue.check.name == "exploding"

    def test_full_consumption_wraps_failure(self, make_commit, binary_diff):
        conf = Configuration.parse(["[checks]", "error = exploding"])
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        with pytest.raises(CheckError) as excinfo:
            run(commit, parse_message(commit), conf, _registry(ExplodingCheck()))
        assert "exploding" in str(excinfo.value)
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_fail_fast_run_stops_at_first_error(self, make_commit, binary_diff):
        conf = Configuration.parse(["[checks]", "error = exploding"])
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        report = run(commit, parse_message(commit), conf, _registry(ExplodingCheck()), fail_fast=True)
        assert report.blocked is True
        assert [i.check.name for i in report.issues] == ["exploding"]

    def test_fail_fast_run_keeps_warnings(self, make_commit, binary_diff):
        conf = Configuration.parse(["[checks]", "warning = binary", '[checks "binary"]', ".*=1"])
        commit = make_commit([binary_diff("file.bin", Status.added(), 9)])
        report = run(commit, parse_message(commit), conf, build_registry(), fail_fast=True)
        assert report.blocked is False
        assert [i.severity for i in report.warnings] == [Severity.WARNING]

    def test_first_error_none_when_clean(self, conf, make_commit, textual_diff):
        commit = make_commit([textual_diff()])
        assert first_error(commit, parse_message(commit), conf, build_registry()) is None


class TestContext:
    def test_context_passed_through(self, make_commit, textual_diff):
        conf = Configuration.parse(["[checks]", "warning = context"])
        commit = make_commit([textual_diff()])
        registry = _registry(ContextCheck())
        message = parse_message(commit)
        assert run(commit, message, conf, registry).total_issues == 0
        report = run(commit, message, conf, registry, CheckContext(extras={"flag": True}))
        assert report.total_issues == 1


class TestRunAll:
    @pytest.mark.parametrize("workers", [1, 4])
    def test_reports_in_input_order(self, conf, make_commit, binary_diff, workers):
        commits = [
            make_commit([binary_diff(f"f{i}.bin", Status.added(), 9 if i % 2 else 0)], commit_hash=f"{i:040x}")
            for i in range(8)
        ]
        items = [(c, parse_message(c)) for c in commits]
        reports = run_all(items, conf, build_registry(), max_workers=workers)
        assert [r.commit for r in reports] == commits
        assert [r.blocked for r in reports] == [bool(i % 2) for i in range(8)]

    def test_unknown_check_fails_before_running(self, make_commit, textual_diff):
        conf = Configuration.parse(["[checks]", "error = nope"])
        commit = make_commit([textual_diff()])
        with pytest.raises(UnknownCheckError):
            run_all([(commit, parse_message(commit))], conf, build_registry(), max_workers=4)
