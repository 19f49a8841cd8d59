from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from tfe_plan_summary import config, logging_utils
from tfe_plan_summary.client import TfeClient
from tfe_plan_summary.domain.models import Credential

API_PREFIX = "/api/v2"


class FakeTfeApi:
    """Route table standing in for the control plane.

    ``routes`` maps an API path (without ``/api/v2``) to ``(status, payload)``;
    a ``str`` payload is sent verbatim, anything else as JSON. Unknown paths
    answer with a JSON:API 404 error document.
    """

    def __init__(self, routes: dict[str, tuple[int, object]] | None = None) -> None:
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        if path not in self.routes:
            return httpx.Response(
                404, json={"errors": [{"status": "404", "title": "not found"}]}
            )
        status, payload = self.routes[path]
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    @property
    def paths(self) -> list[str]:
        return [r.url.path.removeprefix(API_PREFIX) for r in self.requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self, token: str | None = "test-token", **kwargs: object) -> TfeClient:
        return TfeClient(Credential(token=token), transport=self.transport(), **kwargs)


def request_body(request: httpx.Request) -> dict[str, object]:
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def fake_api() -> Callable[..., FakeTfeApi]:
    return FakeTfeApi


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in config.ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    monkeypatch.setattr(logging_utils, "_logging_configured", False)
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()


def production_routes(plan_document: dict[str, object]) -> dict[str, tuple[int, object]]:
    """Routes for a healthy production-infrastructure workspace."""
    return {
        "/organizations/acme/workspaces/production-infrastructure": (
            200,
            {"data": {"id": "ws-abc123", "type": "workspaces"}},
        ),
        "/workspaces/ws-abc123/runs": (
            200,
            {
                "data": [
                    {"id": "run-xyz789", "type": "runs"},
                    {"id": "run-older01", "type": "runs"},
                ]
            },
        ),
        "/runs/run-xyz789": (
            200,
            {
                "data": {
                    "id": "run-xyz789",
                    "type": "runs",
                    "relationships": {"plan": {"data": {"id": "plan-111", "type": "plans"}}},
                }
            },
        ),
        "/plans/plan-111/json-output-redacted": (200, plan_document),
    }


PLAN_DOCUMENT = {
    "format_version": "1.2",
    "terraform_version": "1.7.5",
    "resource_changes": [
        {"address": "aws_s3_bucket.logs", "change": {"actions": ["create"]}},
        {"address": "aws_iam_role.ci", "change": {"actions": ["update"]}},
        {"address": "aws_sqs_queue.jobs", "change": {"actions": ["create"]}},
        {"address": "aws_vpc.main", "change": {"actions": ["no-op"]}},
    ],
}
