"""Severity mapping and path normalization.

Both are total functions: every input yields a value, unknown input falls
back to a documented default instead of raising.

Severity policy (rustc / clippy ``level`` → Code Quality severity):

    help, note, failure-note          → info
    warning                           → minor
    error                             → major (``critical`` when configured)
    error: internal compiler error    → blocker
    anything else                     → minor
"""

import logging
import posixpath
import re

from lint_lab.models import Severity

logger = logging.getLogger(__name__)

DEFAULT_SEVERITY = Severity.MINOR
ERROR_SEVERITIES = (Severity.MAJOR, Severity.CRITICAL)

_LEVELS: dict[str, Severity] = {
    "help": Severity.INFO,
    "note": Severity.INFO,
    "failure-note": Severity.INFO,
    "warning": Severity.MINOR,
    "error: internal compiler error": Severity.BLOCKER,
}

_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:/")


def map_severity(level, error_severity: Severity = Severity.MAJOR) -> Severity:
    """Map a diagnostic *level* onto the canonical severity scale."""
    if not isinstance(level, str):
        return DEFAULT_SEVERITY
    key = level.strip().lower()
    if key == "error":
        return error_severity
    return _LEVELS.get(key, DEFAULT_SEVERITY)


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or bool(_WINDOWS_DRIVE_RE.match(path))


def _clean(path: str) -> str:
    path = path.replace("\\", "/")
    cleaned = posixpath.normpath(path) if path else path
    # normpath keeps a leading "//" (POSIX allows it to be special)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def normalize_path(path: str, project_root: str | None = None) -> str:
    """Return *path* relative to *project_root* with ``/`` separators.

    Absolute paths outside *project_root* are returned unchanged (apart from
    separator cleanup) and a warning is logged.
    """
    cleaned = _clean(path)
    if cleaned == ".":
        return ""
    if not _is_absolute(cleaned):
        return cleaned

    if project_root:
        root = _clean(project_root).rstrip("/")
        if cleaned.startswith(root + "/"):
            return cleaned[len(root) + 1:]

    logger.warning("Absolute path outside the project root left unchanged: %s", cleaned)
    return cleaned
