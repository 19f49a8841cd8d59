"""Pipeline orchestration: workspace name in, change summary out."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from tfe_plan_summary.aggregator import summarize
from tfe_plan_summary.client import TfeClient
from tfe_plan_summary.config import Settings
from tfe_plan_summary.domain.models import ChangeSummary, Credential, WorkspaceRef
from tfe_plan_summary.errors import PlanSummaryError
from tfe_plan_summary.resolver import (
    resolve_latest_run,
    resolve_plan_id,
    resolve_redacted_plan,
    resolve_workspace_id,
)

_T = TypeVar("_T")

STEP_WORKSPACE = "workspace"
STEP_RUN = "run"
STEP_PLAN = "plan"
STEP_PLAN_DOCUMENT = "plan-document"


class PlanSummaryPipeline:
    """Resolve the latest speculative plan of a workspace and summarize it.

    Steps run strictly in order. The first failure is re-raised unchanged
    apart from its ``step`` attribute; no partial summary is produced.
    """

    def __init__(self, client: TfeClient, logger: logging.Logger | None = None) -> None:
        self._client = client
        self._logger = logger or logging.getLogger(__name__)

    def _step(self, name: str, func: Callable[..., _T], *args: str) -> _T:
        self._logger.debug("Resolving %s", name)
        try:
            return func(self._client, *args)
        except PlanSummaryError as exc:
            exc.step = name
            self._logger.debug("%s step failed: %s", name, exc.message)
            raise

    def run(self, workspace: WorkspaceRef) -> ChangeSummary:
        workspace_id = self._step(
            STEP_WORKSPACE, resolve_workspace_id, workspace.organization, workspace.name
        )
        run_id = self._step(STEP_RUN, resolve_latest_run, workspace_id)
        plan_id = self._step(STEP_PLAN, resolve_plan_id, run_id)
        document = self._step(STEP_PLAN_DOCUMENT, resolve_redacted_plan, plan_id)

        summary = summarize(document)
        self._logger.info(
            "Plan %s for %s: %d to create, %d to update, %d to delete",
            plan_id,
            workspace.key,
            summary.create,
            summary.update,
            summary.delete,
        )
        return summary


def run_from_settings(settings: Settings, logger: logging.Logger | None = None) -> ChangeSummary:
    """Build a client from ``settings`` and run the pipeline once."""
    organization, workspace_name = settings.require_workspace()
    credential = Credential(token=settings.tfe.token, host=settings.tfe.host)
    with TfeClient(credential, timeout=settings.tfe.timeout_seconds) as client:
        pipeline = PlanSummaryPipeline(client, logger=logger)
        return pipeline.run(WorkspaceRef(organization=organization, name=workspace_name))
