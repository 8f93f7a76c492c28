"""CLI entry point — command definitions using Click.

Commands:
    init      Generate a template config file
    lints     clippy JSON stream   → GitLab Code Quality report
    rustfmt   rustfmt JSON stream  → GitLab Code Quality report
    stats     Project statistics as OpenMetrics, Prometheus text or JSON
"""

import functools
import sys
from pathlib import Path

import click

from lint_lab import __version__
from lint_lab.logs import setup_logging
from lint_lab.reports.metrics import FORMATS

DEFAULT_LOCKFILE = "Cargo.lock"


# ---------------------------------------------------------------------------
# Helpers shared by all data commands
# ---------------------------------------------------------------------------

def _load_config(ctx: click.Context):
    """Load the config; the default path may be absent, an explicit one may not."""
    from lint_lab.config import load

    obj = ctx.obj
    config = load(obj["config_path"], required=obj["config_explicit"])
    if obj["verbose"]:
        click.echo(f"[verbose] Project root: {config.resolved_root}", err=True)
    return config


def _handle_errors(func):
    """Decorator that catches expected failures and exits with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from lint_lab.config import ConfigError
        from lint_lab.pushgateway import AuthenticationError, NetworkError, PushGatewayError
        from lint_lab.reports.codequality import ReportError
        from lint_lab.reports.metrics import ExpositionError
        from lint_lab.stats import StatsError
        from lint_lab.streams import StreamError

        try:
            return func(*args, **kwargs)
        except ConfigError as exc:
            click.echo(f"Configuration error: {exc}", err=True)
            sys.exit(1)
        except StreamError as exc:
            click.echo(f"I/O error: {exc}", err=True)
            sys.exit(1)
        except ReportError as exc:
            click.echo(f"Report error: {exc}", err=True)
            sys.exit(1)
        except (StatsError, ExpositionError) as exc:
            click.echo(f"Statistics error: {exc}", err=True)
            sys.exit(1)
        except AuthenticationError as exc:
            click.echo(f"Authentication error: {exc}", err=True)
            sys.exit(1)
        except NetworkError as exc:
            click.echo(f"Network error: {exc}", err=True)
            sys.exit(1)
        except PushGatewayError as exc:
            click.echo(f"Pushgateway error: {exc}", err=True)
            sys.exit(1)

    return wrapper


def _convert(ctx: click.Context, source: str, input_path: str, output_path: str) -> None:
    """Run the *source* pipeline from *input_path* and write the report to *output_path*."""
    from lint_lab.pipeline import run
    from lint_lab.reports.codequality import write_report
    from lint_lab.streams import check_readable, open_input, open_output

    config = _load_config(ctx)
    check_readable(input_path)

    if ctx.obj["verbose"]:
        click.echo(f"[verbose] Reading {source} records from '{input_path}'", err=True)

    with open_input(input_path) as stream:
        result = run(
            stream,
            source,
            project_root=config.resolved_root,
            error_severity=config.error_severity,
        )
    with open_output(output_path) as sink:
        write_report(result.issues, sink, pretty=ctx.obj["pretty"])

    click.echo(f"{source}: {result.summary()}", err=True)
    if output_path != "-":
        click.echo(f"Report written to '{output_path}'", err=True)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default="lint-lab.yaml", show_default=True,
              help="Path to the configuration file (optional at its default location).")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print JSON output.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="lint-lab")
@click.pass_context
def cli(ctx: click.Context, config_path: str, pretty: bool, verbose: bool) -> None:
    """lint-lab — GitLab Code Quality reports and metrics from cargo diagnostics."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["config_explicit"] = (
        ctx.get_parameter_source("config_path") is not click.core.ParameterSource.DEFAULT
    )
    ctx.obj["pretty"] = pretty
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="lint-lab.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template lint-lab.yaml file."""
    from lint_lab.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# lints / rustfmt
# ---------------------------------------------------------------------------

@cli.command("lints")
@click.option("-i", "--input", "input_path", required=True,
              help="clippy JSON stream; use - for stdin.")
@click.option("-o", "--output", "output_path", required=True,
              help="Code Quality report; use - for stdout.")
@click.pass_context
@_handle_errors
def lints_command(ctx: click.Context, input_path: str, output_path: str) -> None:
    """Convert clippy JSON output to a GitLab Code Quality report.

    \b
    Example:
        cargo clippy --message-format=json -- -W clippy::pedantic \\
            | lint-lab lints -i - -o gl-code-quality-report.json
    """
    _convert(ctx, "clippy", input_path, output_path)


@cli.command("rustfmt")
@click.option("-i", "--input", "input_path", required=True,
              help="rustfmt JSON output; use - for stdin.")
@click.option("-o", "--output", "output_path", default="-", show_default=True,
              help="Code Quality report; use - for stdout.")
@click.pass_context
@_handle_errors
def rustfmt_command(ctx: click.Context, input_path: str, output_path: str) -> None:
    """Convert rustfmt JSON output (nightly) to a GitLab Code Quality report.

    \b
    Example:
        cargo +nightly fmt -- --emit json | lint-lab rustfmt -i - -o fmt-report.json
    """
    _convert(ctx, "rustfmt", input_path, output_path)


# ---------------------------------------------------------------------------
# stats
# ---------------------------------------------------------------------------

@cli.command("stats")
@click.option("-f", "--format", "fmt", type=click.Choice(FORMATS), default="open-metrics",
              show_default=True, help="Output format.")
@click.option("-o", "--output", "output_path", default="-", show_default=True,
              help="Metrics document; use - for stdout.")
@click.option("--lockfile", default=None,
              help=f"Cargo.lock to count dependencies from [default: {DEFAULT_LOCKFILE} if present].")
@click.option("--issues", "issue_reports", multiple=True,
              help="Code Quality report to count issues from (repeatable).")
@click.option("--count", "counts", multiple=True, metavar="NAME=VALUE",
              help="Extra counter to publish, e.g. files_scanned=120 (repeatable).")
@click.option("--push", "push_url", default=None,
              help="Also push the metrics to this Prometheus Pushgateway URL.")
@click.option("--job", default=None,
              help="Pushgateway job name [default: from config, else lint-lab].")
@click.pass_context
@_handle_errors
def stats_command(ctx: click.Context, fmt: str, output_path: str, lockfile: str | None,
                  issue_reports: tuple[str, ...], counts: tuple[str, ...],
                  push_url: str | None, job: str | None) -> None:
    """Print out project statistics."""
    from lint_lab.models import IssueSet
    from lint_lab.pushgateway import PushGateway
    from lint_lab.reports.codequality import load_report
    from lint_lab.reports.metrics import render
    from lint_lab.stats import aggregate, parse_counts, read_lockfile
    from lint_lab.streams import check_readable, open_input, open_output

    config = _load_config(ctx)
    extra = parse_counts(counts)
    for path in issue_reports:
        check_readable(path)

    dependencies = None
    if lockfile is not None:
        dependencies = read_lockfile(lockfile)
    elif Path(DEFAULT_LOCKFILE).is_file():
        dependencies = read_lockfile(DEFAULT_LOCKFILE)

    issues = IssueSet()
    for path in issue_reports:
        with open_input(path) as stream:
            for issue in load_report(stream, source=path):
                issues.add(issue)
        if ctx.obj["verbose"]:
            click.echo(f"[verbose] Loaded issues from '{path}' ({len(issues)} unique so far)", err=True)

    families = aggregate(
        issues,
        counts=extra,
        dependencies=dependencies,
        top_rules=config.top_rules,
        prefix=config.prefix,
    )

    with open_output(output_path) as sink:
        sink.write(render(families, fmt))
    if output_path != "-":
        click.echo(f"Metrics written to '{output_path}'", err=True)

    url = push_url or config.pushgateway_url
    if url:
        gateway = PushGateway(url=url, job=job or config.pushgateway_job)
        if ctx.obj["verbose"]:
            click.echo(f"[verbose] Pushing metrics to {gateway.endpoint}", err=True)
        gateway.push(render(families, "prometheus"))
        click.echo(f"Metrics pushed to '{gateway.endpoint}'", err=True)
