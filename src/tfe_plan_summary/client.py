"""HTTP client for the Terraform Cloud / Enterprise v2 REST API."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from tfe_plan_summary.domain.models import Credential
from tfe_plan_summary.errors import AuthError, ProtocolError, TransportError
from tfe_plan_summary.utils.masking import mask_headers, scrub_secret

logger = logging.getLogger(__name__)

JSON_API_CONTENT_TYPE = "application/vnd.api+json"
DEFAULT_TIMEOUT_SECONDS = 30.0

_AUTH_REJECTED_STATUSES = frozenset({401, 403})
_MAX_BODY_IN_ERROR = 4096


def _truncate(text: str) -> str:
    if len(text) <= _MAX_BODY_IN_ERROR:
        return text
    return text[:_MAX_BODY_IN_ERROR] + "...[truncated]"


class TfeClient:
    """Single-shot JSON:API client.

    Each :meth:`request` performs exactly one HTTP round trip. Retrying is
    left to whoever invokes the pipeline.
    """

    def __init__(
        self,
        credential: Credential,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._credential = credential
        self._timeout = timeout
        self._transport = transport
        self._http: httpx.Client | None = None

    @property
    def base_url(self) -> str:
        return self._credential.base_url

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._credential.token}",
            "Content-Type": JSON_API_CONTENT_TYPE,
            "Accept": JSON_API_CONTENT_TYPE,
        }

    def _get_http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> TfeClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: str | None = None,
        *,
        params: dict[str, str] | None = None,
        expect_envelope: bool = True,
    ) -> dict[str, Any]:
        """Issue one request and return the decoded JSON object.

        ``endpoint`` is relative to ``/api/v2``. ``body`` must already be a
        serialized JSON string. With ``expect_envelope`` the response must be
        a JSON:API document carrying a top-level ``data`` key; otherwise any
        JSON object from a 2xx response is accepted as-is.

        Raises:
            AuthError: token missing, or the server answered 401/403.
            TransportError: connection, DNS or timeout failure.
            ProtocolError: body cannot be decoded or is not the expected JSON shape.
        """
        token = self._credential.token
        if not token or not token.strip():
            raise AuthError("missing credential: TFE_TOKEN is not set")

        path = "/" + endpoint.lstrip("/")
        headers = self._headers()
        logger.debug("%s %s%s headers=%s", method, self.base_url, path, mask_headers(headers))
        try:
            response = self._get_http().request(
                method,
                path,
                content=body.encode("utf-8") if body is not None else None,
                params=params,
                headers=headers,
            )
            text = response.text
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"request to {path} timed out after {self._timeout}s: {exc}"
            ) from exc
        except httpx.DecodingError as exc:
            raise ProtocolError(f"undecodable response body from {path}: {exc}") from exc
        except httpx.TransportError as exc:
            raise TransportError(f"could not reach {self.base_url}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request to {path} failed: {exc}") from exc

        raw = scrub_secret(text, token)
        logger.debug("%s %s -> HTTP %d", method, path, response.status_code)

        if response.status_code in _AUTH_REJECTED_STATUSES:
            raise AuthError(
                f"credential rejected for {path} (HTTP {response.status_code})"
            )

        try:
            document = json.loads(text) if text.strip() else None
        except ValueError as exc:
            raise ProtocolError(
                f"malformed JSON from {path}",
                body=_truncate(raw),
                status_code=response.status_code,
            ) from exc

        if not isinstance(document, dict):
            raise ProtocolError(
                f"expected a JSON object from {path}",
                body=_truncate(raw),
                status_code=response.status_code,
            )

        if expect_envelope:
            if "data" not in document:
                raise ProtocolError(
                    f"response from {path} has no 'data' envelope",
                    body=_truncate(raw),
                    status_code=response.status_code,
                )
        elif response.is_error:
            raise ProtocolError(
                f"unexpected HTTP {response.status_code} from {path}",
                body=_truncate(raw),
                status_code=response.status_code,
            )

        return document
