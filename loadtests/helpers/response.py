"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Handles two response shapes:

- Envelope errors: {"success": false, "error": "Kind", "message": "...", "details": {...}}
- Framework errors that bypass the envelope: {"detail": "..."} or {"detail": [{"loc": [...], "msg": "..."}]}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:300]

    # Envelope: {"error": "InsufficientStock", "message": "Insufficient stock for ..."}
    if "error" in body:
        message = body.get("message")
        return f"{body['error']}: {message}" if message else str(body["error"])

    detail = body.get("detail")
    if isinstance(detail, list):
        parts = []
        for err in detail:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)
    if detail:
        return str(detail)

    return str(body)[:300]


def envelope_data(response: Response):
    """The ``data`` member of a successful envelope, or None."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("success"):
        return body.get("data")
    return None
