"""Tests for lint_lab/config.py"""

import os
import textwrap
from pathlib import Path

import pytest

from lint_lab.config import (
    Config,
    ConfigError,
    generate_template,
    load,
)
from lint_lab.models import Severity


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("LINT_LAB_PROJECT_ROOT", "LINT_LAB_ERROR_SEVERITY", "LINT_LAB_PUSHGATEWAY_URL"):
        monkeypatch.delenv(name, raising=False)


def write_config(tmp_path: Path, content: str) -> Path:
    p = tmp_path / "lint-lab.yaml"
    p.write_text(textwrap.dedent(content), encoding="utf-8")
    return p


VALID_YAML = """\
    project_root: "/builds/group/app"
    severity:
      error: critical
    stats:
      top_rules: 10
      prefix: "lint_lab_"
    pushgateway:
      url: "https://push.example.com"
      job: "app"
    """


# ---------------------------------------------------------------------------
# load() — happy path
# ---------------------------------------------------------------------------

def test_load_valid_config(tmp_path):
    p = write_config(tmp_path, VALID_YAML)
    config = load(str(p))
    assert config.project_root == "/builds/group/app"
    assert config.error_severity is Severity.CRITICAL
    assert config.top_rules == 10
    assert config.prefix == "lint_lab_"
    assert config.pushgateway_url == "https://push.example.com"
    assert config.pushgateway_job == "app"


def test_empty_file_gives_defaults(tmp_path):
    p = write_config(tmp_path, "")
    assert load(str(p)) == Config()


def test_defaults():
    config = Config()
    assert config.error_severity is Severity.MAJOR
    assert config.top_rules == 0
    assert config.pushgateway_job == "lint-lab"
    assert os.path.isabs(config.resolved_root)


# ---------------------------------------------------------------------------
# load() — missing file
# ---------------------------------------------------------------------------

def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load(str(tmp_path / "no-such-file.yaml"))


def test_load_missing_optional_file(tmp_path):
    assert load(str(tmp_path / "no-such-file.yaml"), required=False) == Config()


# ---------------------------------------------------------------------------
# load() — invalid values
# ---------------------------------------------------------------------------

def test_load_malformed_yaml(tmp_path):
    p = write_config(tmp_path, "severity: [unclosed\n")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load(str(p))


def test_load_non_mapping(tmp_path):
    p = write_config(tmp_path, "- a\n- b\n")
    with pytest.raises(ConfigError, match="mapping"):
        load(str(p))


def test_load_invalid_error_severity(tmp_path):
    p = write_config(tmp_path, """\
        severity:
          error: minor
        """)
    with pytest.raises(ConfigError, match="severity.error"):
        load(str(p))


def test_load_invalid_top_rules(tmp_path):
    p = write_config(tmp_path, """\
        stats:
          top_rules: -1
        """)
    with pytest.raises(ConfigError, match="stats.top_rules"):
        load(str(p))


def test_load_invalid_prefix(tmp_path):
    p = write_config(tmp_path, """\
        stats:
          prefix: "lint-lab-"
        """)
    with pytest.raises(ConfigError, match="stats.prefix"):
        load(str(p))


def test_load_invalid_pushgateway_url(tmp_path):
    p = write_config(tmp_path, """\
        pushgateway:
          url: "push.example.com"
        """)
    with pytest.raises(ConfigError, match="pushgateway.url"):
        load(str(p))


def test_all_errors_are_reported_together(tmp_path):
    p = write_config(tmp_path, """\
        severity:
          error: info
        stats:
          top_rules: many
        """)
    with pytest.raises(ConfigError) as excinfo:
        load(str(p))
    assert "severity.error" in str(excinfo.value)
    assert "stats.top_rules" in str(excinfo.value)


def test_section_must_be_mapping(tmp_path):
    p = write_config(tmp_path, "stats: 3\n")
    with pytest.raises(ConfigError, match="'stats'"):
        load(str(p))


# ---------------------------------------------------------------------------
# load() — environment variable overrides
# ---------------------------------------------------------------------------

def test_env_project_root_overrides_config(tmp_path, monkeypatch):
    p = write_config(tmp_path, VALID_YAML)
    monkeypatch.setenv("LINT_LAB_PROJECT_ROOT", "/override")
    assert load(str(p)).project_root == "/override"


def test_env_error_severity_overrides_config(tmp_path, monkeypatch):
    p = write_config(tmp_path, VALID_YAML)
    monkeypatch.setenv("LINT_LAB_ERROR_SEVERITY", "MAJOR")
    assert load(str(p)).error_severity is Severity.MAJOR


def test_env_vars_apply_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv("LINT_LAB_PUSHGATEWAY_URL", "http://localhost:9091")
    config = load(str(tmp_path / "absent.yaml"), required=False)
    assert config.pushgateway_url == "http://localhost:9091"


# ---------------------------------------------------------------------------
# generate_template()
# ---------------------------------------------------------------------------

def test_generate_template_creates_loadable_file(tmp_path):
    out = tmp_path / "lint-lab.yaml"
    generate_template(str(out))
    content = out.read_text()
    assert "severity:" in content
    assert "pushgateway:" in content
    assert load(str(out)) == Config()


def test_generate_template_refuses_to_overwrite(tmp_path):
    out = tmp_path / "lint-lab.yaml"
    out.write_text("existing content")
    with pytest.raises(ConfigError, match="already exists"):
        generate_template(str(out))
