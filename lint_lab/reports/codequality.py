"""GitLab Code Quality report.

Format (https://docs.gitlab.com/ee/ci/testing/code_quality.html#implement-a-custom-tool):

    [{"description": "...", "check_name": "clippy::needless_clone",
      "fingerprint": "<hex>", "severity": "minor",
      "location": {"path": "src/a.rs", "lines": {"begin": 10}}}]

Functions:
    to_entry(issue)                       -> dict
    write_report(issues, sink, pretty)    streams the array to *sink*
    load_report(stream)                   -> IssueSet
"""

import json
import textwrap
from typing import Any, Iterable, TextIO

from lint_lab.models import Issue, IssueSet, Severity


class ReportError(Exception):
    """Raised when a Code Quality document cannot be read back."""


def to_entry(issue: Issue) -> dict[str, Any]:
    lines: dict[str, int] = {"begin": issue.line_begin}
    if issue.line_end is not None and issue.line_end > issue.line_begin:
        lines["end"] = issue.line_end
    return {
        "description": issue.description,
        "check_name": issue.rule_id,
        "fingerprint": issue.fingerprint,
        "severity": issue.severity.value,
        "location": {"path": issue.path, "lines": lines},
    }


def write_report(issues: Iterable[Issue], sink: TextIO, pretty: bool = False) -> int:
    """Write *issues* as a JSON array, one entry at a time. Returns the entry count."""
    count = 0
    for issue in issues:
        if pretty:
            sink.write("[\n" if count == 0 else ",\n")
            text = json.dumps(to_entry(issue), indent=2, ensure_ascii=False)
            sink.write(textwrap.indent(text, "  "))
        else:
            sink.write("[" if count == 0 else ",")
            sink.write(json.dumps(to_entry(issue), ensure_ascii=False, separators=(",", ":")))
        count += 1

    if count == 0:
        sink.write("[]\n")
    else:
        sink.write("\n]\n" if pretty else "]\n")
    return count


# ---------------------------------------------------------------------------
# Reading reports back (stats --issues)
# ---------------------------------------------------------------------------

def load_report(stream: TextIO, source: str = "<report>") -> IssueSet:
    """Parse a Code Quality document into an :class:`IssueSet`.

    Stored fingerprints are kept as they are so issues from several reports
    deduplicate against each other.
    """
    try:
        data = json.load(stream)
    except json.JSONDecodeError as exc:
        raise ReportError(f"'{source}' is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ReportError(f"'{source}' must contain a JSON array at the top level.")

    issues = IssueSet()
    for index, entry in enumerate(data):
        issues.add(_from_entry(entry, f"{source}[{index}]"))
    return issues


def _from_entry(entry: Any, where: str) -> Issue:
    try:
        location = entry["location"]
        lines = location["lines"]
        return Issue(
            rule_id=str(entry["check_name"]),
            message=str(entry["description"]),
            severity=Severity(entry["severity"]),
            path=str(location["path"]),
            line_begin=int(lines["begin"]),
            line_end=int(lines["end"]) if lines.get("end") is not None else None,
            fingerprint=str(entry.get("fingerprint") or ""),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ReportError(f"Invalid Code Quality entry at {where}: {exc!r}") from exc
