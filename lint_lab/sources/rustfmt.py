"""rustfmt ``--emit json`` records.

``cargo +nightly fmt -- --emit json`` prints one JSON array per crate:

    [{"name": "/work/src/main.rs",
      "mismatches": [{"original_begin_line": 3, "original_end_line": 4,
                      "expected_begin_line": 3, "expected_end_line": 3,
                      "original": "...", "expected": "..."}]}]

Each mismatch becomes one issue.
"""

import logging
from typing import Any, Iterator

from lint_lab.models import Issue, Severity
from lint_lab.normalize import normalize_path

logger = logging.getLogger(__name__)

NAME = "rustfmt"
RULE_ID = "rustfmt"
MESSAGE = "Incorrect formatting, run cargo fmt"


def findings(record: Any) -> Iterator[dict]:
    """Yield one ``{"name", "mismatch"}`` finding per mismatch in *record*."""
    entries = record if isinstance(record, list) else [record]
    for entry in entries:
        if not isinstance(entry, dict) or "mismatches" not in entry:
            continue
        mismatches = entry.get("mismatches")
        if not isinstance(mismatches, list):
            continue
        for mismatch in mismatches:
            if isinstance(mismatch, dict):
                yield {"name": entry.get("name"), "mismatch": mismatch}


def normalize(
    finding: dict,
    project_root: str | None = None,
    error_severity: Severity = Severity.MAJOR,
) -> Issue | None:
    """Build an :class:`Issue` for one formatting mismatch.

    *error_severity* is accepted for a uniform signature; rustfmt findings
    are always ``minor``.
    """
    name = finding.get("name")
    mismatch = finding.get("mismatch") or {}
    begin = mismatch.get("original_begin_line")
    if not isinstance(name, str) or not name or not isinstance(begin, int) or begin < 1:
        logger.debug("Skipping rustfmt mismatch without a location: %r", finding)
        return None

    path = normalize_path(name, project_root)
    if not path:
        logger.debug("Skipping rustfmt mismatch without a usable path: %r", name)
        return None

    end = mismatch.get("original_end_line")
    return Issue(
        rule_id=RULE_ID,
        message=MESSAGE,
        severity=Severity.MINOR,
        path=path,
        line_begin=begin,
        line_end=end if isinstance(end, int) and end > begin else None,
    )
