"""Decode → normalize → fingerprint → deduplicate, in one sequential pass.

Usage:
    result = run(stream, "clippy", project_root="/builds/app")
    write_report(result.issues, sink)
"""

import logging
from dataclasses import dataclass, field
from types import ModuleType
from typing import TextIO

from lint_lab.decoder import DecodeError, decode_lines
from lint_lab.models import IssueSet, Severity
from lint_lab.sources import clippy, rustfmt

logger = logging.getLogger(__name__)

SOURCES: dict[str, ModuleType] = {
    clippy.NAME: clippy,
    rustfmt.NAME: rustfmt,
}


@dataclass
class PipelineResult:
    issues: IssueSet = field(default_factory=IssueSet)
    records: int = 0
    malformed: int = 0
    ignored: int = 0
    skipped: int = 0

    @property
    def duplicates(self) -> int:
        return self.issues.duplicates

    def summary(self) -> str:
        return (
            f"{len(self.issues)} issue(s) from {self.records} record(s); "
            f"{self.malformed} malformed, {self.ignored} ignored, "
            f"{self.skipped} skipped, {self.duplicates} duplicate(s)"
        )


def run(
    stream: TextIO,
    source: str,
    project_root: str | None = None,
    error_severity: Severity = Severity.MAJOR,
) -> PipelineResult:
    """Consume *stream* with the adapter registered as *source*."""
    adapter = SOURCES[source]
    result = PipelineResult()

    def _on_error(error: DecodeError) -> None:
        result.malformed += 1

    for record in decode_lines(stream, on_error=_on_error):
        result.records += 1
        found = False
        for finding in adapter.findings(record):
            found = True
            issue = adapter.normalize(finding, project_root, error_severity)
            if issue is None:
                result.skipped += 1
                continue
            if not result.issues.add(issue):
                logger.debug("Duplicate issue %s at %s:%d", issue.rule_id, issue.path, issue.line_begin)
        if not found:
            result.ignored += 1

    return result
