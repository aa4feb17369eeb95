"""JSON-over-HTTP transport for the bundled REST adapters."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from inboxsync._redact import redact_for_log
from inboxsync.config import SyncConfig
from inboxsync.exceptions import SyncApiError, SyncTransportError

_logger = logging.getLogger(__name__)

USER_AGENT = "inboxsync/1"


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`JsonTransport`) concrete.
    """

    async def request(self, method: str, endpoint: str, payload: Any | None = None) -> Any: ...


class JsonTransport:
    """Sends JSON requests to ``config.base_url`` and decodes JSON replies."""

    def __init__(self, config: SyncConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self) -> dict[str, str]:
        headers = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        if self._config.api_token:
            headers["authorization"] = f"Bearer {self._config.api_token}"
        return headers

    async def request(self, method: str, endpoint: str, payload: Any | None = None) -> Any:
        """Send one request; return the decoded body (``None`` when empty)."""
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        body = json.dumps(payload, separators=(",", ":")) if payload is not None else None

        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled and payload is not None:
            _logger.debug("%s %s request=%s", method, endpoint, redact_for_log(payload))

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                headers=self._headers(),
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise SyncApiError(
                        f"HTTP {resp.status} from {method} {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except SyncTransportError:
            raise
        except TimeoutError as exc:
            raise SyncTransportError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise SyncTransportError(f"Request to {endpoint} failed: {exc}", endpoint=endpoint) from exc

        if not text.strip():
            return None
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SyncTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("%s %s response=%s", method, endpoint, redact_for_log(decoded))
        return decoded
