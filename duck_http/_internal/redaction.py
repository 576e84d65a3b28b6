"""Redaction of sensitive request headers for debug output."""

from collections.abc import Mapping

REDACT_HEADERS: frozenset[str] = frozenset({
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "api-key",
    "x-auth-token",
    "x-access-token",
    "x-refresh-token",
    "x-csrf-token",
})

REDACTED_VALUE = "[REDACTED]"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of headers with sensitive values replaced.

    Header names are matched case-insensitively; the original mapping is
    never mutated and the original name casing is preserved.

    Args:
        headers: The headers to redact.

    Returns:
        A new dictionary with sensitive values replaced by "[REDACTED]".
    """
    return {
        key: REDACTED_VALUE if key.lower() in REDACT_HEADERS else value
        for key, value in headers.items()
    }
