"""Helpers that keep credentials out of log output and error messages."""

from __future__ import annotations

_MASK = "***"

# Header names whose values must never be logged (case-insensitive).
SENSITIVE_HEADERS: frozenset[str] = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
    }
)


def mask_headers(headers: dict[str, str], *, mask: str = _MASK) -> dict[str, str]:
    """Return a copy of ``headers`` with sensitive values replaced."""
    return {
        key: (mask if key.lower() in SENSITIVE_HEADERS else value)
        for key, value in headers.items()
    }


def scrub_secret(text: str, secret: str | None, *, mask: str = _MASK) -> str:
    """Remove every occurrence of ``secret`` from ``text``.

    Used on raw response bodies before they are attached to errors, since
    some proxies echo the request headers back on failure.
    """
    if not secret or not text:
        return text
    return text.replace(secret, mask)
