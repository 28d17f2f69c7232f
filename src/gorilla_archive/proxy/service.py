"""Request forwarding service.

Turns an inbound ``/api/*`` request into an outbound request against the
configured backend base origin and returns the backend response as-is.
"""

from typing import Dict, Iterable, List, Optional, Tuple, Union

import httpx

from gorilla_archive.core.base import BaseService
from gorilla_archive.core.config import BASE_URL_ENV_VAR
from gorilla_archive.core.exceptions import ConfigurationError
from gorilla_archive.models.proxy import ProxyRequest, ProxyResponse
from .client import BackendClient

# Regenerated by the outbound transport.
EXCLUDED_REQUEST_HEADERS = frozenset({"host", "content-length"})


def join_path(path: Union[None, str, List[str]]) -> str:
    """Rebuild the sub-path from a wildcard capture.

    Args:
        path: None, a single path string, or a list of segments.

    Returns:
        str: The segments joined with '/', or '' when absent.
    """
    if not path:
        return ""
    if isinstance(path, str):
        return path
    return "/".join(path)


def collapse_headers(items: Iterable[Tuple[str, str]]) -> Dict[str, str]:
    """Reduce inbound headers to one value per key.

    Keeps the first non-empty value of each header and drops ``host`` and
    ``content-length``. Later values of a repeated header are discarded.

    Args:
        items: Header (name, value) pairs in arrival order.

    Returns:
        Dict[str, str]: Lowercased header names mapped to a single value.
    """
    headers: Dict[str, str] = {}
    for key, value in items:
        name = key.lower()
        if name in EXCLUDED_REQUEST_HEADERS or not value or name in headers:
            continue
        headers[name] = value
    return headers


class ForwarderService(BaseService):
    """Forwards requests to the backend base origin."""

    def __init__(
        self,
        base_origin: Optional[str],
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize the forwarder.

        Args:
            base_origin: Backend base origin, or None when unconfigured.
            transport: Optional httpx transport passed to the backend client.
            timeout: Optional request timeout in seconds.
        """
        super().__init__()
        self.base_origin = base_origin
        self._client = BackendClient(base_origin, transport=transport, timeout=timeout) if base_origin else None

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def startup(self) -> None:
        await super().startup()
        if self.is_configured:
            self.logger.info("Forwarding /api requests", base_origin=self.base_origin)
        else:
            self.logger.warning(f"{BASE_URL_ENV_VAR} not set, /api requests will fail with 500")

    def target_url(self, request: ProxyRequest) -> str:
        """Target URL for a request: ``{base}/{path}`` plus the raw query."""
        return self._require_client().build_url(request.path, request.query)

    async def forward(self, request: ProxyRequest) -> ProxyResponse:
        """Forward a request and return the backend response.

        Args:
            request: Inbound request.

        Returns:
            ProxyResponse: Backend status, headers and raw body.

        Raises:
            ConfigurationError: If no base origin is configured. No network
                call is attempted.
            BackendUnavailableError: If the backend cannot be reached or read.
        """
        client = self._require_client()
        url = client.build_url(request.path, request.query)
        content = request.body if request.forwards_body else None

        return await client.send(request.method, url, request.headers, content)

    def _require_client(self) -> BackendClient:
        if self._client is None:
            raise ConfigurationError(BASE_URL_ENV_VAR)
        return self._client
