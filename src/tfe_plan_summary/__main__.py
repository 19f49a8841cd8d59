"""Allow ``python -m tfe_plan_summary``."""

from tfe_plan_summary.cli import run_entrypoint

if __name__ == "__main__":  # pragma: no cover
    run_entrypoint()
