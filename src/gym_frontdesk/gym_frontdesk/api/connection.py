from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from ..core.constants import DEFAULT_API_TIMEOUT_SECONDS

TokenProvider = Callable[[], Optional[str]]


@dataclass
class ApiConfig:
    base_url: str
    timeout_seconds: float = DEFAULT_API_TIMEOUT_SECONDS


class ApiConnection:
    """HTTP client factory for the backend REST API.

    Note: We open short-lived clients per operation, like a connection per query.
    The bearer token comes from the auth collaborator through ``token_provider``;
    this layer only forwards it.
    """

    def __init__(
        self,
        config: ApiConfig,
        *,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._config = config
        self._token_provider = token_provider
        self._transport = transport

    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self._token_provider() if self._token_provider else None
        if token:
            if not token.lower().startswith("bearer "):
                token = f"Bearer {token}"
            headers["Authorization"] = token
        return headers

    def connect(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._config.base_url.rstrip("/"),
            timeout=self._config.timeout_seconds,
            headers=self.headers(),
            transport=self._transport,
        )
