"""HTTP helpers for OpenAI-compatible endpoints."""

from __future__ import annotations

from typing import Any

import requests

from note_assistant.core.errors import ServiceError


def post_json(
    url: str,
    payload: dict[str, Any],
    *,
    api_key: str,
    timeout: float,
    error_cls: type[ServiceError] = ServiceError,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """POST a JSON payload and return the decoded reply.

    Transport failures, non-2xx replies and undecodable bodies are raised as
    ``error_cls`` carrying the server's own message when it sent one.
    """
    if not api_key:
        raise error_cls("Please provide an API key in the settings")
    http = session or requests
    try:
        resp = http.post(
            url,
            json=payload,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise error_cls(f"Request to {url} failed: {exc}") from exc
    if not resp.ok:
        raise error_cls(f"Request failed ({resp.status_code}): {_error_detail(resp)}")
    try:
        body = resp.json()
    except ValueError as exc:
        raise error_cls(f"Invalid JSON reply from {url}") from exc
    if not isinstance(body, dict):
        raise error_cls(f"Unexpected reply from {url}")
    return body


def _error_detail(resp: requests.Response) -> str:
    try:
        detail = resp.json()
    except ValueError:
        return resp.text
    if isinstance(detail, dict):
        error = detail.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return str(detail)


__all__ = ["post_json"]
