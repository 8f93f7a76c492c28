"""cargo / clippy ``--message-format=json`` records.

Every line of the stream is a JSON object with a ``reason`` field. Only
``compiler-message`` records carry diagnostics; ``compiler-artifact``,
``build-script-executed``, ``build-finished`` and anything else are ignored.

Example of a relevant record (trimmed):

    {"reason": "compiler-message",
     "message": {"message": "redundant clone",
                 "code": {"code": "clippy::redundant_clone"},
                 "level": "warning",
                 "spans": [{"file_name": "src/a.rs", "line_start": 10,
                            "line_end": 10, "column_start": 5,
                            "is_primary": true,
                            "text": [{"text": "    let b = a.clone();"}]}],
                 "children": [...]}}
"""

import logging
from typing import Any, Iterator

from lint_lab.models import Issue, Severity
from lint_lab.normalize import map_severity, normalize_path

logger = logging.getLogger(__name__)

NAME = "clippy"
COMPILER_MESSAGE = "compiler-message"
UNKNOWN_RULE = "unknown"


def findings(record: Any) -> Iterator[dict]:
    """Yield the diagnostic carried by *record*, if it carries one."""
    if not isinstance(record, dict) or record.get("reason") != COMPILER_MESSAGE:
        return
    diagnostic = record.get("message")
    if isinstance(diagnostic, dict):
        yield diagnostic


def normalize(
    diagnostic: dict,
    project_root: str | None = None,
    error_severity: Severity = Severity.MAJOR,
) -> Issue | None:
    """Build an :class:`Issue` from one rustc diagnostic, or None if it has no location."""
    span = primary_span(diagnostic.get("spans"))
    if span is None:
        logger.debug("Skipping diagnostic without a location: %r", diagnostic.get("message"))
        return None

    path = normalize_path(str(span.get("file_name") or ""), project_root)
    line_begin = _positive_int(span.get("line_start"))
    if not path or line_begin is None:
        logger.debug("Skipping diagnostic with an unusable span: %r", span)
        return None

    line_end = _positive_int(span.get("line_end"))
    return Issue(
        rule_id=_rule_id(diagnostic),
        message=str(diagnostic.get("message") or "").strip(),
        severity=map_severity(diagnostic.get("level"), error_severity),
        path=path,
        line_begin=line_begin,
        line_end=line_end if line_end and line_end > line_begin else None,
        column=_positive_int(span.get("column_start")),
        suggestion=_suggestion(diagnostic, span),
    )


# ---------------------------------------------------------------------------
# Span helpers
# ---------------------------------------------------------------------------

def primary_span(spans: Any) -> dict | None:
    """Return the primary span, resolved out of macro expansions.

    Falls back to the first span when none is flagged primary. Spans whose
    ``file_name`` is synthetic (``<...>``) are followed through
    ``expansion.span`` until a real file is reached.
    """
    if not isinstance(spans, list):
        return None
    spans = [s for s in spans if isinstance(s, dict)]
    if not spans:
        return None

    span = next((s for s in spans if s.get("is_primary")), spans[0])
    while str(span.get("file_name") or "").startswith("<"):
        expansion = span.get("expansion")
        if not isinstance(expansion, dict) or not isinstance(expansion.get("span"), dict):
            return None
        span = expansion["span"]
    return span


def _rule_id(diagnostic: dict) -> str:
    code = diagnostic.get("code")
    if isinstance(code, dict) and code.get("code"):
        return str(code["code"])
    return UNKNOWN_RULE


def _suggestion(diagnostic: dict, span: dict) -> str | None:
    parts: list[str] = []

    text = span.get("text")
    if isinstance(text, list):
        source = "".join(
            str(line.get("text") or "").strip() for line in text if isinstance(line, dict)
        )
        if source:
            parts.append(source)

    replacement = _first_replacement(diagnostic.get("children"))
    if replacement:
        parts.append(f"Suggestion: {replacement}")

    return " ".join(parts) or None


def _first_replacement(children: Any) -> str | None:
    if not isinstance(children, list):
        return None
    for child in children:
        if not isinstance(child, dict):
            continue
        for span in child.get("spans") or []:
            if isinstance(span, dict) and span.get("suggested_replacement"):
                return str(span["suggested_replacement"]).strip() or None
    return None


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None
