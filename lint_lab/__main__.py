from lint_lab.cli import cli

cli(prog_name="lint-lab")
