"""Lookups that walk from a workspace name to its latest redacted plan.

Each function performs one API call and extracts a single identifier from a
loosely structured JSON:API document. Nested fields are read defensively:
anything missing or of the wrong type counts as absent.
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

from tfe_plan_summary.client import TfeClient
from tfe_plan_summary.errors import NotFoundError

logger = logging.getLogger(__name__)

RUN_STATUS_FILTER = "planned_and_finished"
RUN_OPERATION_FILTER = "plan_only"
RUN_PAGE_SIZE = 5


def _dig(node: Any, *keys: str) -> Any:
    """Follow ``keys`` through nested dicts, returning None on any miss."""
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def resolve_workspace_id(client: TfeClient, organization: str, workspace_name: str) -> str:
    document = client.request(
        f"/organizations/{quote(organization, safe='')}/workspaces/{quote(workspace_name, safe='')}"
    )
    workspace_id = _non_empty_str(_dig(document, "data", "id"))
    if workspace_id is None:
        raise NotFoundError(
            f"workspace '{organization}/{workspace_name}' not found or not accessible "
            "with the supplied token"
        )
    logger.info("Workspace %s/%s resolved to %s", organization, workspace_name, workspace_id)
    return workspace_id


def run_filter_body() -> str:
    return json.dumps(
        {
            "filter": {"status": RUN_STATUS_FILTER, "operation": RUN_OPERATION_FILTER},
            "page": {"number": 1, "size": RUN_PAGE_SIZE},
        }
    )


def run_filter_params() -> dict[str, str]:
    return {
        "filter[status]": RUN_STATUS_FILTER,
        "filter[operation]": RUN_OPERATION_FILTER,
        "page[number]": "1",
        "page[size]": str(RUN_PAGE_SIZE),
    }


def resolve_latest_run(client: TfeClient, workspace_id: str) -> str:
    """Return the id of the newest finished plan-only run.

    The API lists runs newest first, so the first entry of the page wins.
    """
    document = client.request(
        f"/workspaces/{quote(workspace_id, safe='')}/runs",
        body=run_filter_body(),
        params=run_filter_params(),
    )
    runs = document.get("data")
    if not isinstance(runs, list) or not runs:
        raise NotFoundError(
            f"no matching run: workspace {workspace_id} has no "
            f"{RUN_STATUS_FILTER} {RUN_OPERATION_FILTER} runs"
        )

    run_id = _non_empty_str(_dig(runs[0], "id"))
    if run_id is None:
        raise NotFoundError(f"latest run listed for workspace {workspace_id} has no id")
    if len(runs) > 1:
        logger.debug(
            "%d qualifying runs returned for %s, using newest %s",
            len(runs),
            workspace_id,
            run_id,
        )
    logger.info("Latest speculative run for %s is %s", workspace_id, run_id)
    return run_id


def resolve_plan_id(client: TfeClient, run_id: str) -> str:
    document = client.request(f"/runs/{quote(run_id, safe='')}")
    plan_id = _non_empty_str(_dig(document, "data", "relationships", "plan", "data", "id"))
    if plan_id is None:
        raise NotFoundError(f"run {run_id} has no linked plan")
    logger.info("Run %s links plan %s", run_id, plan_id)
    return plan_id


def resolve_redacted_plan(client: TfeClient, plan_id: str) -> dict[str, Any]:
    """Fetch the server-side redacted JSON plan, returned unmodified."""
    return client.request(
        f"/plans/{quote(plan_id, safe='')}/json-output-redacted",
        expect_envelope=False,
    )
