"""Domain objects for plan resolution."""

from __future__ import annotations

import json
from dataclasses import dataclass

from tfe_plan_summary.config import DEFAULT_TFE_HOST


@dataclass(frozen=True)
class Credential:
    """Pre-issued bearer token plus the API host it is valid for."""

    token: str | None
    host: str = DEFAULT_TFE_HOST

    @property
    def base_url(self) -> str:
        return f"https://{self.host}/api/v2"

    def __repr__(self) -> str:
        shown = "***" if self.token else "None"
        return f"Credential(token={shown}, host={self.host})"


@dataclass(frozen=True)
class WorkspaceRef:
    organization: str
    name: str

    @property
    def key(self) -> str:
        return f"{self.organization}/{self.name}"


@dataclass(frozen=True)
class ChangeSummary:
    create: int = 0
    update: int = 0
    delete: int = 0

    def __post_init__(self) -> None:
        for field_name in ("create", "update", "delete"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} count must be non-negative")

    def as_dict(self) -> dict[str, int]:
        return {"create": self.create, "update": self.update, "delete": self.delete}

    def to_json(self) -> str:
        """Render the CI report line, e.g. ``{"create":2,"update":1,"delete":0}``."""
        return json.dumps(self.as_dict(), separators=(",", ":"))
