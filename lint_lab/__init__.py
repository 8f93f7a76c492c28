"""lint-lab — GitLab Code Quality reports and project metrics from cargo diagnostics."""

__version__ = "0.3.0"
