"""Tests for lint_lab/models.py — IssueSet and MetricFamily."""

from lint_lab.models import Issue, IssueSet, MetricFamily, MetricKind, Severity


def _issue(path="src/a.rs", line=10, message="redundant clone") -> Issue:
    return Issue(rule_id="clippy::needless_clone", message=message,
                 severity=Severity.MINOR, path=path, line_begin=line)


# ---------------------------------------------------------------------------
# IssueSet
# ---------------------------------------------------------------------------

def test_add_returns_true_for_new_issue():
    issues = IssueSet()
    assert issues.add(_issue()) is True
    assert len(issues) == 1


def test_duplicate_is_dropped_and_counted():
    issues = IssueSet()
    issues.add(_issue())
    assert issues.add(_issue()) is False
    assert len(issues) == 1
    assert issues.duplicates == 1


def test_first_seen_instance_is_retained():
    first = _issue()
    second = Issue(rule_id=first.rule_id, message=first.message, severity=Severity.MAJOR,
                   path=first.path, line_begin=first.line_begin, suggestion="other")
    issues = IssueSet([first, second])
    assert list(issues) == [first]


def test_iteration_preserves_insertion_order():
    a, b, c = _issue(line=30), _issue(line=10), _issue(line=20)
    issues = IssueSet([a, b, a, c, b])
    assert list(issues) == [a, b, c]
    assert issues.duplicates == 2


def test_membership_and_lookup_by_fingerprint():
    issue = _issue()
    issues = IssueSet([issue])
    assert issue.fingerprint in issues
    assert issues.get(issue.fingerprint) is issue
    assert issues.get("missing") is None


def test_empty_set():
    issues = IssueSet()
    assert len(issues) == 0
    assert list(issues) == []


# ---------------------------------------------------------------------------
# MetricFamily
# ---------------------------------------------------------------------------

def test_family_add_keeps_label_order():
    family = MetricFamily("issues_by_rule", "help", MetricKind.COUNTER)
    sample = family.add(3, rule="r", tool="clippy")
    assert sample.labels == (("rule", "r"), ("tool", "clippy"))
    assert sample.name == "issues_by_rule"
    assert sample.kind is MetricKind.COUNTER
    assert family.samples == [sample]


def test_severity_serializes_lowercase():
    assert [str(s) for s in Severity] == ["info", "minor", "major", "critical", "blocker"]
