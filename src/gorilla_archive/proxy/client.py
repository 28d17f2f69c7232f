"""Backend HTTP client.

This module provides the httpx client that issues forwarded requests and
captures the backend response for relaying.
"""

import time
from typing import Dict, Optional

import httpx

from gorilla_archive.core.base import BaseClient
from gorilla_archive.core.exceptions import BackendUnavailableError
from gorilla_archive.core.monitoring import track_error, track_proxy_request
from gorilla_archive.models.proxy import ProxyResponse


class BackendClient(BaseClient):
    """HTTP client for the forwarding backend.

    A fresh ``httpx.AsyncClient`` is opened per call; nothing is pooled or
    shared between requests.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the backend client.

        Args:
            base_url: Backend base origin.
            transport: Optional httpx transport, e.g. a mock in tests.
            timeout: Request timeout in seconds, None for httpx's default.
        """
        super().__init__(name="Backend", base_url=base_url, timeout=timeout)
        self._transport = transport

    def build_url(self, path: str, query: str = "") -> str:
        """Build the target URL, appending the raw query string verbatim.

        Args:
            path: Path below the base origin.
            query: Raw query string without the leading '?'.

        Returns:
            str: Target URL.
        """
        url = self._build_url(path)
        return f"{url}?{query}" if query else url

    async def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        content: Optional[bytes] = None,
    ) -> ProxyResponse:
        """Send one request and read the full raw response body.

        Args:
            method: HTTP method.
            url: Target URL.
            headers: Outbound headers, one value per key.
            content: Body to forward, if any.

        Returns:
            ProxyResponse: Status, headers and undecoded body bytes.

        Raises:
            BackendUnavailableError: On any failure to reach or read the backend.
        """
        start_time = time.time()
        headers = dict(headers)
        # The body is relayed undecoded, so only ask for an encoding the caller asked for.
        headers.setdefault("accept-encoding", "identity")

        client_kwargs = {"transport": self._transport}
        if self.timeout is not None:
            client_kwargs["timeout"] = self.timeout

        self._log_request(method, url)

        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                async with client.stream(method, url, headers=headers, content=content) as response:
                    body = b"".join([chunk async for chunk in response.aiter_raw()])
        except httpx.TimeoutException as e:
            raise self._unavailable("Backend request timed out", method, url, start_time, e) from e
        except httpx.HTTPError as e:
            raise self._unavailable(f"Backend request failed: {e!r}", method, url, start_time, e) from e
        except Exception as e:
            raise self._unavailable(f"Unexpected error calling backend: {e!r}", method, url, start_time, e) from e

        duration = time.time() - start_time
        self._log_response(method, url, response.status_code, duration)
        track_proxy_request(method, str(response.status_code), duration)

        return ProxyResponse(
            status_code=response.status_code,
            headers=list(response.headers.multi_items()),
            body=body,
            elapsed_time=duration,
        )

    def _unavailable(
        self,
        message: str,
        method: str,
        url: str,
        start_time: float,
        cause: Exception,
    ) -> BackendUnavailableError:
        duration = time.time() - start_time
        track_proxy_request(method, "error", duration)
        track_error(type(cause).__name__, "proxy")
        return BackendUnavailableError(message, target_url=url, method=method, cause=cause)
