"""Forwarder router.

Catch-all ``/api`` routes that relay every request to the backend.
"""

from fastapi import APIRouter, Depends, Request, Response

from gorilla_archive.models.proxy import HttpMethod, ProxyRequest, ProxyResponse
from .dependencies import get_forwarder_service
from .service import ForwarderService, collapse_headers

router = APIRouter()

# Mount point of the forwarder; everything below it is relayed untouched.
PROXY_PREFIX = "/api"

FORWARDED_METHODS = [method.value for method in HttpMethod]

# Framing headers; the relayed response recomputes its own framing.
EXCLUDED_RESPONSE_HEADERS = frozenset({"content-length", "transfer-encoding", "connection"})


async def _forward(request: Request, path: str, forwarder: ForwarderService) -> Response:
    body = await request.body()

    proxy_request = ProxyRequest(
        method=request.method,
        path=path,
        query=request.url.query,
        headers=collapse_headers(request.headers.items()),
        body=body or None,
    )

    upstream = await forwarder.forward(proxy_request)
    return relay_response(upstream, request.method)


def relay_response(upstream: ProxyResponse, method: str = "GET") -> Response:
    """Build a response carrying the backend status, headers and body bytes.

    The length of a relayed body is recomputed, except for HEAD and 304
    responses: they carry no body, so the backend's ``content-length`` is
    the only meaningful one and is copied through.

    Args:
        upstream: Captured backend response.
        method: Method of the forwarded request.

    Returns:
        Response: Response to send to the original caller.
    """
    response = Response(content=upstream.body, status_code=upstream.status_code)
    bodiless = method.upper() == HttpMethod.HEAD.value or upstream.status_code == 304

    excluded = EXCLUDED_RESPONSE_HEADERS
    if bodiless and any(key.lower() == "content-length" for key, _ in upstream.headers):
        del response.headers["content-length"]
        excluded = excluded - {"content-length"}

    for key, value in upstream.headers:
        if key.lower() not in excluded:
            response.headers.append(key, value)
    return response


@router.api_route("", methods=FORWARDED_METHODS, include_in_schema=False)
async def forward_root(
    request: Request,
    forwarder: ForwarderService = Depends(get_forwarder_service),
) -> Response:
    """Forward a request for the backend root."""
    return await _forward(request, "", forwarder)


@router.api_route("/{path:path}", methods=FORWARDED_METHODS, summary="Forward to backend")
async def forward(
    path: str,
    request: Request,
    forwarder: ForwarderService = Depends(get_forwarder_service),
) -> Response:
    """Forward a request to ``{base_origin}/{path}`` and relay the response.

    Errors are rendered by the application exception handlers:
    a missing base origin becomes 500 and any transport failure 502.
    """
    return await _forward(request, path, forwarder)
