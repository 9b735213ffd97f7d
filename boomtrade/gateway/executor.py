"""HTTP request executor for the gateway JSON contract, using aiohttp."""
import asyncio
import json
import logging
from typing import Any

import aiohttp

from boomtrade.core.errors import BackendRejectedError, DecodeError, GatewayTimeoutError, TransportError

logger = logging.getLogger(__name__)


class GatewayExecutor:
    """Issues one HTTP request per call and classifies failures.

    No retries are attempted: every failure surfaces to the caller as a
    GatewayError subclass.

    Attributes:
        base_url: Gateway base URL (no trailing slash)
        default_timeout: Timeout in seconds for calls that do not pass one
    """

    def __init__(self, base_url: str, default_timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.default_timeout = default_timeout
        self._session: aiohttp.ClientSession | None = None

    @property
    def is_open(self) -> bool:
        return self._session is not None and not self._session.closed

    def _get_session(self) -> aiohttp.ClientSession:
        # Created lazily so it binds to the running loop
        if not self.is_open:
            self._session = aiohttp.ClientSession(headers={"Accept": "application/json"})
        return self._session

    async def get(self, path: str, timeout: float | None = None) -> Any:
        return await self.request("GET", path, timeout=timeout)

    async def post(self, path: str, body: Any = None, timeout: float | None = None) -> Any:
        return await self.request("POST", path, body=body, timeout=timeout)

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """Execute a single request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to base_url
            body: JSON-serializable request body, or None
            timeout: Total timeout in seconds (default: default_timeout)

        Returns:
            Decoded JSON value, or None for an empty response body

        Raises:
            GatewayTimeoutError: If the request exceeded its timeout
            TransportError: On connection/network failure
            BackendRejectedError: If the gateway returned HTTP status >= 400
            DecodeError: If the response body is not valid JSON
        """
        url = f"{self.base_url}{path}"
        total = timeout if timeout is not None else self.default_timeout

        logger.debug(
            "STEP 1/2: Sending gateway request",
            extra={
                "extra_data": {
                    "action": "request_start",
                    "method": method,
                    "path": path,
                    "timeout": total,
                }
            },
        )

        session = self._get_session()
        try:
            async with session.request(
                method,
                url,
                json=body,
                timeout=aiohttp.ClientTimeout(total=total),
            ) as response:
                status = response.status
                raw = await response.read()
        except asyncio.TimeoutError as e:
            logger.warning(f"{method} {path} timed out after {total}s")
            raise GatewayTimeoutError(f"{method} {path} timed out after {total}s") from e
        except (aiohttp.ClientError, OSError) as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise TransportError(f"Network error on {method} {path}: {e}") from e

        logger.debug(
            "STEP 2/2: Gateway response received",
            extra={
                "extra_data": {
                    "action": "request_done",
                    "method": method,
                    "path": path,
                    "status": status,
                    "bytes": len(raw),
                }
            },
        )

        if status >= 400:
            text = raw.decode("utf-8", errors="replace")
            raise BackendRejectedError(_error_message(text, status), status_code=status)

        if not raw.strip():
            return None

        try:
            return json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise DecodeError(f"Response from {method} {path} is not valid UTF-8: {e}") from e
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {method} {path}: {e}") from e

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.is_open:
            await self._session.close()
        self._session = None


def _error_message(text: str, status: int) -> str:
    """Pull a human-readable message out of an error response body."""
    try:
        data = json.loads(text)
    except ValueError:
        data = None

    if isinstance(data, dict):
        for key in ("detail", "message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value

    if text.strip():
        return text.strip()[:200]
    return f"HTTP {status}"
