"""Route ``logging`` output through ``click.echo`` on stderr."""

import logging

import click


class ClickHandler(logging.Handler):
    """Emit each record as one line on stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False) -> None:
    """Attach a single :class:`ClickHandler` to the ``lint_lab`` logger.

    WARNING and above by default, DEBUG with *verbose*.
    """
    logger = logging.getLogger("lint_lab")
    logger.handlers.clear()

    handler = ClickHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
