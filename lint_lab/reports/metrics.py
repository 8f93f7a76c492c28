"""Metrics exposition.

Formats:
    open-metrics   OpenMetrics text, terminated by ``# EOF``
    prometheus     Prometheus text exposition 0.0.4
    json           {family: value | [{"labels": {...}, "value": ...}]}

For OpenMetrics, counter families are declared without the ``_total``
suffix and their samples carry it, e.g. family ``issues_total`` renders as:

    # HELP issues Number of issues in the report.
    # TYPE issues counter
    issues_total 3
"""

import json
from typing import Iterable

from lint_lab.models import MetricFamily, MetricKind, MetricSample

FORMATS = ("open-metrics", "prometheus", "json")
CONTENT_TYPES = {
    "open-metrics": "application/openmetrics-text; version=1.0.0; charset=utf-8",
    "prometheus": "text/plain; version=0.0.4; charset=utf-8",
    "json": "application/json",
}
_COUNTER_SUFFIX = "_total"


class ExpositionError(Exception):
    """Raised when families would render into an unparseable document."""


# ---------------------------------------------------------------------------
# Escaping / formatting
# ---------------------------------------------------------------------------

def escape_label_value(value: str) -> str:
    return value.replace("\\", r"\\").replace("\n", r"\n").replace('"', r"\"")


def escape_help(text: str) -> str:
    return text.replace("\\", r"\\").replace("\n", r"\n")


def format_value(value: int | float) -> str:
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _format_labels(labels: tuple[tuple[str, str], ...]) -> str:
    if not labels:
        return ""
    inner = ",".join(f'{key}="{escape_label_value(str(value))}"' for key, value in labels)
    return "{" + inner + "}"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _check(families: list[MetricFamily], openmetrics: bool) -> None:
    seen: set[str] = set()
    for family in families:
        name = _declared_name(family, openmetrics)
        if name in seen:
            raise ExpositionError(f"Metric family '{name}' declared twice")
        seen.add(name)

        label_sets: set[tuple[tuple[str, str], ...]] = set()
        for sample in family.samples:
            if sample.labels in label_sets:
                raise ExpositionError(
                    f"Duplicate sample {_format_labels(sample.labels) or '{}'} in '{family.name}'"
                )
            label_sets.add(sample.labels)


def _declared_name(family: MetricFamily, openmetrics: bool) -> str:
    if openmetrics and family.kind is MetricKind.COUNTER and family.name.endswith(_COUNTER_SUFFIX):
        return family.name[: -len(_COUNTER_SUFFIX)]
    return family.name


def _sample_name(family: MetricFamily, sample: MetricSample, openmetrics: bool) -> str:
    if openmetrics and family.kind is MetricKind.COUNTER:
        return _declared_name(family, openmetrics) + _COUNTER_SUFFIX
    return sample.name


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def render_text(families: Iterable[MetricFamily], openmetrics: bool = True) -> str:
    families = list(families)
    _check(families, openmetrics)

    lines: list[str] = []
    for family in families:
        name = _declared_name(family, openmetrics)
        lines.append(f"# HELP {name} {escape_help(family.help)}")
        lines.append(f"# TYPE {name} {family.kind.value}")
        for sample in family.samples:
            sample_name = _sample_name(family, sample, openmetrics)
            lines.append(f"{sample_name}{_format_labels(sample.labels)} {format_value(sample.value)}")
    if openmetrics:
        lines.append("# EOF")
    return "\n".join(lines) + "\n" if lines else ""


def render_json(families: Iterable[MetricFamily], pretty: bool = True) -> str:
    families = list(families)
    _check(families, openmetrics=False)

    doc: dict = {}
    for family in families:
        if len(family.samples) == 1 and not family.samples[0].labels:
            doc[family.name] = family.samples[0].value
        else:
            doc[family.name] = [
                {"labels": dict(sample.labels), "value": sample.value}
                for sample in family.samples
            ]
    return json.dumps(doc, indent=2 if pretty else None, ensure_ascii=False) + "\n"


def render(families: Iterable[MetricFamily], fmt: str) -> str:
    """Render *families* in *fmt*, keeping the order they were given in."""
    if fmt == "open-metrics":
        return render_text(families, openmetrics=True)
    if fmt == "prometheus":
        return render_text(families, openmetrics=False)
    if fmt == "json":
        return render_json(families)
    raise ValueError(f"Unknown metrics format '{fmt}'. Expected one of: {', '.join(FORMATS)}")
