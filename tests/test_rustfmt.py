"""Tests for lint_lab/sources/rustfmt.py"""

from lint_lab.models import Severity
from lint_lab.sources import rustfmt


def _mismatch(begin=3, end=4) -> dict:
    return {
        "original_begin_line": begin,
        "original_end_line": end,
        "expected_begin_line": begin,
        "expected_end_line": begin,
        "original": "fn main()   {}\n",
        "expected": "fn main() {}\n",
    }


def _entry(name="/work/src/main.rs", mismatches=None) -> dict:
    return {"name": name, "mismatches": [_mismatch()] if mismatches is None else mismatches}


def test_each_mismatch_is_a_finding():
    record = [_entry(mismatches=[_mismatch(3, 4), _mismatch(10, 10)]), _entry("/work/src/lib.rs")]
    found = list(rustfmt.findings(record))
    assert len(found) == 3
    assert [f["name"] for f in found] == ["/work/src/main.rs", "/work/src/main.rs", "/work/src/lib.rs"]


def test_single_object_is_accepted():
    assert len(list(rustfmt.findings(_entry()))) == 1


def test_unrelated_records_yield_nothing(noise):
    for record in noise:
        assert list(rustfmt.findings(record)) == []
    assert list(rustfmt.findings([])) == []
    assert list(rustfmt.findings([_entry(mismatches=[])])) == []


def test_normalize_mismatch():
    finding = next(rustfmt.findings([_entry()]))
    issue = rustfmt.normalize(finding, "/work")
    assert issue.rule_id == "rustfmt"
    assert issue.severity is Severity.MINOR
    assert issue.message == rustfmt.MESSAGE
    assert issue.path == "src/main.rs"
    assert (issue.line_begin, issue.line_end) == (3, 4)


def test_single_line_mismatch_has_no_end():
    finding = next(rustfmt.findings([_entry(mismatches=[_mismatch(7, 7)])]))
    assert rustfmt.normalize(finding, "/work").line_end is None


def test_missing_location_is_skipped():
    assert rustfmt.normalize({"name": None, "mismatch": _mismatch()}) is None
    assert rustfmt.normalize({"name": "src/a.rs", "mismatch": {"original_begin_line": 0}}) is None
    assert rustfmt.normalize({"name": "src/a.rs", "mismatch": {}}) is None


def test_name_without_a_path_is_skipped():
    assert rustfmt.normalize({"name": ".", "mismatch": _mismatch()}) is None
    assert rustfmt.normalize({"name": "./", "mismatch": _mismatch()}, "/work") is None
