"""Stable, content-derived issue identifiers.

Usage:
    fp = fingerprint("clippy::needless_clone", "redundant clone", "src/a.rs", 10)

The fingerprint is the hex SHA-256 of ``rule_id``, the normalized message,
``path`` and ``line_begin``, joined by NUL bytes. It never depends on the
interpreter's ``hash()`` seed, so it is identical across processes and runs.
"""

import hashlib
import re

_WHITESPACE_RE = re.compile(r"\s+")
_SEPARATOR = b"\x00"


def normalize_message(message: str) -> str:
    """Trim *message* and collapse every run of whitespace to a single space."""
    return _WHITESPACE_RE.sub(" ", message).strip()


def fingerprint(rule_id: str, message: str, path: str, line_begin: int) -> str:
    parts = (rule_id, normalize_message(message), path, str(line_begin))
    digest = hashlib.sha256(_SEPARATOR.join(p.encode("utf-8") for p in parts))
    return digest.hexdigest()
