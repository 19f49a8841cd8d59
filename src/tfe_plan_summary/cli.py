"""Command-line entrypoint: print the change summary of the latest speculative plan."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from tfe_plan_summary.config import load_settings
from tfe_plan_summary.errors import PlanSummaryError
from tfe_plan_summary.logging_utils import get_logger
from tfe_plan_summary.pipeline import run_from_settings

USAGE = """\
usage: tfe-plan-summary [-h | --help | help]

Find the most recent finished plan-only run of a Terraform Cloud/Enterprise
workspace and print its change counts as JSON, for example:

  {"create":2,"update":1,"delete":0}

Configuration is read from the environment (or a .env file):
  TFE_TOKEN            API token (required)
  TFE_ORG              organization name (required)
  WORKSPACE_NAME       workspace name (required)
  TFE_URL              API host (default: app.terraform.io)
  TFE_TIMEOUT_SECONDS  per-request timeout in seconds (default: 30)
  LOG_LEVEL            logging level for stderr output (default: WARNING)
  LOG_FILE             also write logs to this file
  LOG_SYSLOG           also send logs to the local syslog (true/false)

Exit status is 0 on success and 1 on any failure.
"""

HELP_ARGS = frozenset({"-h", "--help", "help"})


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    out = stdout or sys.stdout
    err = stderr or sys.stderr

    if any(arg in HELP_ARGS for arg in args):
        out.write(USAGE)
        return 0
    if args:
        err.write(f"error: unexpected argument(s): {' '.join(args)}\n\n{USAGE}")
        return 1

    try:
        settings = load_settings()
        logger = get_logger("tfe_plan_summary")
        summary = run_from_settings(settings, logger=logger)
    except PlanSummaryError as exc:
        err.write(f"error: {exc.describe()}\n")
        return 1

    out.write(summary.to_json() + "\n")
    return 0


def run_entrypoint() -> None:
    sys.exit(main())
