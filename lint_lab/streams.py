"""Input and output streams selected by a path argument, ``-`` meaning stdin/stdout.

Usage:
    with open_input("clippy.json") as stream:
        ...
    with open_output("gl-code-quality-report.json") as sink:
        sink.write("[]\n")

File outputs are written to a temporary file next to the destination and
moved into place only when the block finishes without an exception, so a
failed run never leaves a truncated report behind.
"""

import os
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

STDIO = "-"


class StreamError(Exception):
    """Raised when an input cannot be read or an output cannot be written."""


@contextmanager
def open_input(path: str) -> Iterator[TextIO]:
    if path == STDIO:
        yield sys.stdin
        return
    try:
        f = open(path, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise StreamError(f"Unable to open '{path}': {exc.strerror or exc}") from exc
    with f:
        try:
            yield f
        except OSError as exc:
            raise StreamError(f"Unable to read '{path}': {exc.strerror or exc}") from exc


@contextmanager
def open_output(path: str) -> Iterator[TextIO]:
    if path == STDIO:
        try:
            yield sys.stdout
            sys.stdout.flush()
        except BrokenPipeError as exc:
            raise StreamError("Standard output was closed before the report was complete") from exc
        return

    target = Path(path)
    directory = target.parent
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=directory)
    except OSError as exc:
        raise StreamError(f"Unable to write '{path}': {exc.strerror or exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            yield f
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, target)
    except OSError as exc:
        _discard(tmp_name)
        raise StreamError(f"Unable to write '{path}': {exc.strerror or exc}") from exc
    except BaseException:
        _discard(tmp_name)
        raise


def check_readable(path: str) -> None:
    """Raise StreamError unless *path* is ``-`` or an existing readable file."""
    if path == STDIO:
        return
    p = Path(path)
    if not p.is_file():
        raise StreamError(f"Input file not found: '{path}'")
    if not os.access(p, os.R_OK):
        raise StreamError(f"Input file is not readable: '{path}'")


def _discard(tmp_name: str) -> None:
    try:
        os.unlink(tmp_name)
    except FileNotFoundError:
        pass
