"""Data models shared by the pipeline, the report writers and the statistics.

Contains:
    - Severity      canonical severity scale of the Code Quality format
    - Issue         one deduplicated finding
    - IssueSet      insertion-ordered unique collection of issues
    - MetricKind, MetricSample, MetricFamily
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from lint_lab.fingerprint import fingerprint as compute_fingerprint


class Severity(str, Enum):
    """Code Quality severities, least to most severe."""

    INFO = "info"
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"
    BLOCKER = "blocker"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Issues
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Issue:
    """A single finding attributed to a file and line.

    ``fingerprint`` is derived from ``(rule_id, message, path, line_begin)``
    when not supplied. ``suggestion`` ends up in :attr:`description` only.
    """

    rule_id: str
    message: str
    severity: Severity
    path: str
    line_begin: int
    line_end: int | None = None
    column: int | None = None
    suggestion: str | None = None
    fingerprint: str = ""

    def __post_init__(self) -> None:
        if not self.fingerprint:
            object.__setattr__(
                self,
                "fingerprint",
                compute_fingerprint(self.rule_id, self.message, self.path, self.line_begin),
            )

    @property
    def description(self) -> str:
        if self.suggestion:
            return f"{self.message.removesuffix('.')}. {self.suggestion}"
        return self.message


class IssueSet:
    """Issues unique by fingerprint, iterated in first-seen order.

    Backed by a mapping from fingerprint to issue plus a separate list of
    fingerprints in the order they were first added.
    """

    def __init__(self, issues=()) -> None:
        self._by_fingerprint: dict[str, Issue] = {}
        self._order: list[str] = []
        self.duplicates = 0
        for issue in issues:
            self.add(issue)

    def add(self, issue: Issue) -> bool:
        """Add *issue*; return False (and count a duplicate) if already present."""
        if issue.fingerprint in self._by_fingerprint:
            self.duplicates += 1
            return False
        self._by_fingerprint[issue.fingerprint] = issue
        self._order.append(issue.fingerprint)
        return True

    def get(self, fp: str) -> Issue | None:
        return self._by_fingerprint.get(fp)

    def __contains__(self, fp: object) -> bool:
        return fp in self._by_fingerprint

    def __iter__(self) -> Iterator[Issue]:
        return (self._by_fingerprint[fp] for fp in self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        return f"IssueSet({len(self)} issues, {self.duplicates} duplicates)"


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

class MetricKind(str, Enum):
    COUNTER = "counter"
    GAUGE = "gauge"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MetricSample:
    name: str
    labels: tuple[tuple[str, str], ...]
    value: int | float
    kind: MetricKind


@dataclass
class MetricFamily:
    """A named group of samples sharing help text and type."""

    name: str
    help: str
    kind: MetricKind
    samples: list[MetricSample] = field(default_factory=list)

    def add(self, value: int | float, **labels: str) -> MetricSample:
        sample = MetricSample(
            name=self.name,
            labels=tuple(labels.items()),
            value=value,
            kind=self.kind,
        )
        self.samples.append(sample)
        return sample
