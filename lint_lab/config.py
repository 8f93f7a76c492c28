"""Configuration loading and validation.

Usage:
    config = load("lint-lab.yaml")                  # raises ConfigError on bad config
    config = load("lint-lab.yaml", required=False)  # defaults when the file is absent
    generate_template("lint-lab.yaml")              # writes example file to disk

Environment variables override file values:
    LINT_LAB_PROJECT_ROOT, LINT_LAB_ERROR_SEVERITY, LINT_LAB_PUSHGATEWAY_URL
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from lint_lab.models import Severity
from lint_lab.normalize import ERROR_SEVERITIES

DEFAULT_PATH = "lint-lab.yaml"
DEFAULT_JOB = "lint-lab"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    project_root: str = "."
    error_severity: Severity = Severity.MAJOR
    top_rules: int = 0
    prefix: str = ""
    pushgateway_url: str = ""
    pushgateway_job: str = DEFAULT_JOB

    @property
    def resolved_root(self) -> str:
        """Absolute project root used to relativize absolute diagnostic paths."""
        return os.path.abspath(self.project_root)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str = DEFAULT_PATH, required: bool = True) -> Config:
    """Load and validate configuration from a YAML file.

    Raises:
        ConfigError: if the file is missing (and *required*), malformed, or
                     holds invalid values.
    """
    path = Path(config_path)

    raw: dict = {}
    if path.exists():
        try:
            with path.open(encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Unable to read '{config_path}': {exc.strerror or exc}") from exc
    elif required:
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `lint-lab init` to generate a template."
        )

    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")

    severity = _section(raw, "severity", config_path)
    stats = _section(raw, "stats", config_path)
    pushgateway = _section(raw, "pushgateway", config_path)

    errors: list[str] = []

    project_root = os.environ.get("LINT_LAB_PROJECT_ROOT") or raw.get("project_root") or "."

    error_level = str(
        os.environ.get("LINT_LAB_ERROR_SEVERITY") or severity.get("error") or Severity.MAJOR.value
    ).strip().lower()
    allowed = ", ".join(s.value for s in ERROR_SEVERITIES)
    if error_level not in {s.value for s in ERROR_SEVERITIES}:
        errors.append(f"  - 'severity.error' must be one of: {allowed} (got '{error_level}')")
        error_severity = Severity.MAJOR
    else:
        error_severity = Severity(error_level)

    top_rules = stats.get("top_rules", 0)
    if isinstance(top_rules, bool) or not isinstance(top_rules, int) or top_rules < 0:
        errors.append(f"  - 'stats.top_rules' must be a non-negative integer (got {top_rules!r})")
        top_rules = 0

    prefix = stats.get("prefix") or ""
    if not isinstance(prefix, str):
        errors.append(f"  - 'stats.prefix' must be a string (got {prefix!r})")
        prefix = ""

    config = Config(
        project_root=str(project_root).strip(),
        error_severity=error_severity,
        top_rules=top_rules,
        prefix=prefix.strip(),
        pushgateway_url=str(
            os.environ.get("LINT_LAB_PUSHGATEWAY_URL") or pushgateway.get("url") or ""
        ).strip(),
        pushgateway_job=str(pushgateway.get("job") or DEFAULT_JOB).strip(),
    )
    errors.extend(_validate(config))

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))
    return config


def _section(raw: dict, name: str, config_path: str) -> dict:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' in '{config_path}' must be a mapping.")
    return value


def _validate(config: Config) -> list[str]:
    """Return the list of problems found in *config*."""
    errors: list[str] = []

    if not config.project_root:
        errors.append("  - 'project_root' is empty (or set LINT_LAB_PROJECT_ROOT)")
    if config.prefix and not config.prefix.replace("_", "a").isalnum():
        errors.append(f"  - 'stats.prefix' may only contain letters, digits and '_' (got '{config.prefix}')")
    if config.prefix and config.prefix[0].isdigit():
        errors.append("  - 'stats.prefix' must not start with a digit")
    if config.pushgateway_url and not config.pushgateway_url.startswith(("http://", "https://")):
        errors.append(
            f"  - 'pushgateway.url' must start with http:// or https:// (got '{config.pushgateway_url}')"
        )
    if not config.pushgateway_job:
        errors.append("  - 'pushgateway.job' is empty")

    return errors


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
# Prefix stripped from absolute paths in diagnostics (CI checkout directory).
project_root: "."

severity:
  # Code Quality severity for rustc/clippy "error" diagnostics: major | critical
  error: major

stats:
  # Keep only the N most frequent rules in issues_by_rule (0 = all rules)
  top_rules: 0
  # Prepended to every metric name, e.g. "lint_lab_"
  prefix: ""

pushgateway:
  # Optional Prometheus Pushgateway used by `lint-lab stats --push`
  url: ""
  job: "lint-lab"
"""


def generate_template(output_path: str = DEFAULT_PATH) -> None:
    """Write a template lint-lab.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
