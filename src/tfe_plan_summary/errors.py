"""Error taxonomy for the plan summary pipeline.

Every failure aborts the pipeline. The orchestrator tags the exception with
the name of the resolution step that raised it (``step``) so the CLI can
report which lookup failed without wrapping or replacing the original error.
"""

from __future__ import annotations


class PlanSummaryError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.step: str | None = None

    def describe(self) -> str:
        if self.step:
            return f"{self.step} step failed: {self.message}"
        return self.message


class ConfigurationError(PlanSummaryError):
    """Required configuration is missing or malformed."""


class AuthError(PlanSummaryError):
    """Credential missing locally or rejected by the control plane."""


class TransportError(PlanSummaryError):
    """The control plane could not be reached (network, DNS, timeout)."""


class ProtocolError(PlanSummaryError):
    """A response arrived but is not in the expected shape."""

    def __init__(self, message: str, *, body: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.body = body
        self.status_code = status_code

    def describe(self) -> str:
        base = super().describe()
        status = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{base}{status}; response body: {self.body or '<empty>'}"


class NotFoundError(PlanSummaryError):
    """A resolution step found no matching workspace, run or plan."""
