"""Project statistics.

Functions:
    aggregate(issues, counts, dependencies, top_rules, prefix) -> list[MetricFamily]
    read_lockfile(path)                                        -> int
    parse_counts(["files_scanned=12", ...])                    -> dict[str, int]

Families, in output order:
    issues_total          counter  unique issues
    issues_by_severity    counter  one sample per severity, zeros included
    issues_by_rule        counter  by count desc, then rule id; top N if configured
    dependencies          gauge    packages in Cargo.lock (when read)
    <count name>          counter  pass-through counts, sorted by name
    issues_per_file       gauge    issues_total / files_scanned (when positive)
"""

import re
import tomllib
from collections import Counter
from pathlib import Path
from typing import Iterable

from lint_lab.models import Issue, MetricFamily, MetricKind, Severity

FILES_SCANNED = "files_scanned"

_METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_RESERVED = {"issues", "issues_by_severity", "issues_by_rule", "dependencies", "issues_per_file"}
_COUNTER_SUFFIX = "_total"


class StatsError(Exception):
    """Raised on invalid statistics input (counts, lockfile)."""


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate(
    issues: Iterable[Issue],
    counts: dict[str, int] | None = None,
    dependencies: int | None = None,
    top_rules: int = 0,
    prefix: str = "",
) -> list[MetricFamily]:
    """Compute the metric families for *issues*. Pure: same input, same output."""
    issues = list(issues)
    counts = counts or {}

    by_severity = Counter(issue.severity for issue in issues)
    by_rule = Counter(issue.rule_id for issue in issues)

    total = MetricFamily(prefix + "issues_total", "Number of issues in the report.", MetricKind.COUNTER)
    total.add(len(issues))

    severity = MetricFamily(prefix + "issues_by_severity", "Number of issues per severity.", MetricKind.COUNTER)
    for level in Severity:
        severity.add(by_severity[level], severity=level.value)

    rules = MetricFamily(prefix + "issues_by_rule", "Number of issues per rule.", MetricKind.COUNTER)
    ranked = sorted(by_rule.items(), key=lambda item: (-item[1], item[0]))
    if top_rules > 0:
        ranked = ranked[:top_rules]
    for rule_id, count in ranked:
        rules.add(count, rule=rule_id)

    families = [total, severity, rules]

    if dependencies is not None:
        deps = MetricFamily(prefix + "dependencies", "number of dependencies", MetricKind.GAUGE)
        deps.add(dependencies)
        families.append(deps)

    for name in sorted(counts):
        family = MetricFamily(prefix + name, f"Auxiliary count '{name}'.", MetricKind.COUNTER)
        family.add(counts[name])
        families.append(family)

    files = counts.get(FILES_SCANNED, 0)
    if files > 0:
        ratio = MetricFamily(prefix + "issues_per_file", "Issues per scanned file.", MetricKind.GAUGE)
        ratio.add(len(issues) / files)
        families.append(ratio)

    return families


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

def read_lockfile(path: str | Path) -> int:
    """Return the number of ``[[package]]`` entries in a Cargo.lock."""
    path = Path(path)
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as exc:
        raise StatsError(f"Lockfile not found: '{path}'") from exc
    except OSError as exc:
        raise StatsError(f"Unable to read lockfile '{path}': {exc.strerror or exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise StatsError(f"Failed to parse lockfile '{path}': {exc}") from exc

    packages = data.get("package", [])
    if not isinstance(packages, list):
        raise StatsError(f"'{path}' has a malformed 'package' table.")
    return len(packages)


def parse_counts(pairs: Iterable[str]) -> dict[str, int]:
    """Parse ``NAME=VALUE`` pairs into non-negative integer counts."""
    counts: dict[str, int] = {}
    stems: set[str] = set()
    for pair in pairs:
        name, sep, raw = pair.partition("=")
        name = name.strip()
        if not sep or not name:
            raise StatsError(f"Invalid count '{pair}': expected NAME=VALUE")
        if not _METRIC_NAME_RE.match(name):
            raise StatsError(f"Invalid count name '{name}': must match {_METRIC_NAME_RE.pattern}")
        # counters are exposed as <stem> and <stem>_total, so compare stems
        stem = name.removesuffix(_COUNTER_SUFFIX)
        if stem in _RESERVED:
            raise StatsError(f"Count name '{name}' is reserved")
        if stem in stems:
            raise StatsError(f"Count '{name}' given more than once")
        stems.add(stem)
        try:
            value = int(raw.strip())
        except ValueError as exc:
            raise StatsError(f"Invalid value for count '{name}': '{raw}' is not an integer") from exc
        if value < 0:
            raise StatsError(f"Invalid value for count '{name}': must not be negative")
        counts[name] = value
    return counts
