"""Line-delimited JSON decoding.

Usage:
    for record in decode_lines(stream, on_error=errors.append):
        ...

Each line is decoded on its own. A malformed line is handed to *on_error*
as a :class:`DecodeError` and decoding carries on with the next line.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, TextIO

logger = logging.getLogger(__name__)

_PREVIEW_LENGTH = 80


@dataclass(frozen=True)
class DecodeError:
    """A line that could not be decoded."""

    lineno: int
    line: str
    reason: str

    def __str__(self) -> str:
        preview = self.line[:_PREVIEW_LENGTH]
        return f"line {self.lineno}: {self.reason} ({preview!r})"


def decode_lines(
    stream: TextIO,
    on_error: Callable[[DecodeError], None] | None = None,
) -> Iterator[Any]:
    """Yield one decoded JSON value per non-blank line of *stream*."""
    for lineno, line in enumerate(stream, start=1):
        text = line.strip()
        if not text:
            continue
        try:
            record = json.loads(text)
        except json.JSONDecodeError as exc:
            reason = exc.msg
        except RecursionError:
            reason = "nesting too deep"
        except ValueError as exc:
            reason = str(exc)
        else:
            yield record
            continue

        error = DecodeError(lineno=lineno, line=text, reason=reason)
        logger.debug("Skipping malformed record: %s", error)
        if on_error is not None:
            on_error(error)
