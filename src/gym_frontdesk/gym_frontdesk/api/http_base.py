from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import httpx

from ..core.exceptions import ApiError
from .connection import ApiConnection

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "No se pudo completar la operación. Intenta de nuevo."
INVALID_PAYLOAD_MESSAGE = "Respuesta inválida del servidor"


def api_request(
    conn: ApiConnection,
    method: str,
    path: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Any] = None,
) -> Any:
    """Send one JSON request and return the decoded body.

    Raises ApiError with the server ``detail`` text when the backend rejects the
    request, or a generic message when the transport itself fails.
    """

    clean_params = {k: v for k, v in (params or {}).items() if v is not None}
    try:
        with conn.connect() as client:
            resp = client.request(method, path, params=clean_params or None, json=json)
    except httpx.HTTPError as exc:
        logger.warning("API %s %s failed: %s", method, path, exc)
        raise ApiError(GENERIC_ERROR_MESSAGE) from exc

    if resp.status_code >= 400:
        detail = error_detail(resp)
        logger.warning("API %s %s answered %s: %s", method, path, resp.status_code, detail)
        raise ApiError(detail or GENERIC_ERROR_MESSAGE, status_code=resp.status_code)

    if resp.status_code == 204 or not resp.content:
        return None
    try:
        return resp.json()
    except ValueError as exc:
        raise ApiError(GENERIC_ERROR_MESSAGE, status_code=resp.status_code) from exc


def error_detail(resp: httpx.Response) -> Optional[str]:
    """Extract the human-readable ``detail`` from an error response.

    FastAPI-style backends answer either ``{"detail": "..."}`` or
    ``{"detail": [{"msg": "..."}, ...]}`` for validation failures.
    """

    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    detail = body.get("detail")
    if isinstance(detail, str):
        return detail.strip() or None
    if isinstance(detail, list):
        messages = [str(d.get("msg")) for d in detail if isinstance(d, dict) and d.get("msg")]
        return "; ".join(messages) or None
    return None


def fetchall(body: Any) -> List[Dict[str, Any]]:
    """Normalize list endpoints: bare arrays or ``{"items": [...]}`` pages."""
    if body is None:
        return []
    if isinstance(body, dict):
        body = body.get("items") or []
    return [r for r in body if isinstance(r, dict)]


def fetchone(body: Any) -> Optional[Dict[str, Any]]:
    return body if isinstance(body, dict) and body else None


@contextmanager
def payload_guard(path: str) -> Iterator[None]:
    """Turn a row the mappers cannot read (missing key, bad date, bad number) into ApiError."""
    try:
        yield
    except (KeyError, ValueError, TypeError) as exc:
        logger.warning("API %s returned a malformed payload: %r", path, exc)
        raise ApiError(INVALID_PAYLOAD_MESSAGE) from exc
