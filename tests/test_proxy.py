"""Tests for the /api forwarder."""

import httpx
import pytest

from gorilla_archive.core.exceptions import BackendUnavailableError, ConfigurationError
from gorilla_archive.models.proxy import ProxyRequest
from gorilla_archive.proxy import ForwarderService, collapse_headers, join_path

from .conftest import BACKEND_URL, make_client, make_settings


class TestPathReconstruction:

    @pytest.mark.parametrize(
        "segments, expected",
        [
            ([], f"{BACKEND_URL}/"),
            (["a"], f"{BACKEND_URL}/a"),
            (["a", "b"], f"{BACKEND_URL}/a/b"),
        ],
    )
    def test_segments_join_onto_base(self, segments, expected):
        forwarder = ForwarderService(BACKEND_URL)
        request = ProxyRequest(method="GET", path=join_path(segments))
        assert forwarder.target_url(request) == expected

    def test_join_path_accepts_missing_and_string(self):
        assert join_path(None) == ""
        assert join_path("") == ""
        assert join_path("a/b") == "a/b"

    def test_trailing_slash_on_base_is_ignored(self):
        forwarder = ForwarderService(f"{BACKEND_URL}/")
        assert forwarder.target_url(ProxyRequest(method="GET", path="a")) == f"{BACKEND_URL}/a"

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/api", f"{BACKEND_URL}/"),
            ("/api/", f"{BACKEND_URL}/"),
            ("/api/a", f"{BACKEND_URL}/a"),
            ("/api/a/b", f"{BACKEND_URL}/a/b"),
        ],
    )
    def test_route_targets(self, client, backend, path, expected):
        response = client.get(path)

        assert response.status_code == 200
        assert str(backend.requests[0].url) == expected


class TestQueryPreservation:

    def test_query_string_forwarded_verbatim(self, client, backend):
        client.get("/api/a?x=1&y=2")
        assert str(backend.requests[0].url) == f"{BACKEND_URL}/a?x=1&y=2"

    def test_no_query_string_appended_when_absent(self, client, backend):
        client.get("/api/a")
        assert str(backend.requests[0].url) == f"{BACKEND_URL}/a"

    def test_path_named_query_param_is_not_captured(self, client, backend):
        client.get("/api?path=x")
        assert str(backend.requests[0].url) == f"{BACKEND_URL}/?path=x"


class TestHeaderFiltering:

    def test_host_and_content_length_dropped(self):
        headers = collapse_headers([
            ("host", "foo"),
            ("content-length", "10"),
            ("x-custom", "bar"),
        ])
        assert headers == {"x-custom": "bar"}

    def test_repeated_header_keeps_first_value(self):
        headers = collapse_headers([("X-Multi", "1"), ("x-multi", "2"), ("x-empty", "")])
        assert headers == {"x-multi": "1"}

    def test_route_forwards_custom_headers(self, client, backend):
        client.get("/api/a", headers={"host": "foo", "x-custom": "bar"})

        outbound = backend.requests[0]
        assert outbound.headers["x-custom"] == "bar"
        assert outbound.headers["host"] == "backend.test"

    def test_route_collapses_repeated_headers(self, client, backend):
        client.get("/api/a", headers=[("x-multi", "1"), ("x-multi", "2")])
        assert backend.requests[0].headers.get_list("x-multi") == ["1"]


class TestMethodBodyPolicy:

    def test_get_body_is_not_forwarded(self, client, backend):
        client.request("GET", "/api/a", content=b"payload")

        outbound = backend.requests[0]
        assert outbound.method == "GET"
        assert outbound.content == b""

    def test_post_body_is_forwarded_unchanged(self, client, backend):
        client.post("/api/a", content=b'{"name": "monke"}', headers={"content-type": "application/json"})

        outbound = backend.requests[0]
        assert outbound.method == "POST"
        assert outbound.content == b'{"name": "monke"}'
        assert outbound.headers["content-type"] == "application/json"

    @pytest.mark.anyio
    async def test_head_body_is_not_forwarded(self, backend):
        forwarder = ForwarderService(BACKEND_URL, transport=backend.transport)
        await forwarder.forward(ProxyRequest(method="HEAD", path="a", body=b"payload"))

        assert backend.requests[0].content == b""

    @pytest.mark.anyio
    async def test_put_body_is_forwarded(self, backend):
        forwarder = ForwarderService(BACKEND_URL, transport=backend.transport)
        await forwarder.forward(ProxyRequest(method="put", path="a", body=b"payload"))

        assert backend.requests[0].method == "PUT"
        assert backend.requests[0].content == b"payload"


class TestMissingConfiguration:

    def test_returns_500_without_network_call(self, tmp_path, backend):
        settings = make_settings(tmp_path, backend_base_url=None)

        with make_client(settings, backend) as client:
            response = client.post("/api/a", content=b"payload")

        assert response.status_code == 500
        assert response.json() == {"error": "BASE44_APP_BASE_URL not configured"}
        assert backend.requests == []

    @pytest.mark.anyio
    async def test_service_raises_configuration_error(self, backend):
        forwarder = ForwarderService(None, transport=backend.transport)

        assert not forwarder.is_configured
        with pytest.raises(ConfigurationError):
            await forwarder.forward(ProxyRequest(method="GET"))
        assert backend.requests == []


class TestBackendFailure:

    def test_connection_refused_returns_502(self, client, backend):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        backend.handler = refuse
        response = client.get("/api/a")

        assert response.status_code == 502
        assert response.json() == {"error": "Backend unavailable"}

    def test_timeout_returns_502(self, client, backend):
        def time_out(request):
            raise httpx.ReadTimeout("timed out", request=request)

        backend.handler = time_out
        response = client.get("/api/a")

        assert response.status_code == 502
        assert response.json() == {"error": "Backend unavailable"}

    def test_cause_is_not_leaked(self, client, backend):
        def explode(request):
            raise RuntimeError("internal-host.local:9999 exploded")

        backend.handler = explode
        response = client.get("/api/a")

        assert response.status_code == 502
        assert "internal-host" not in response.text

    @pytest.mark.anyio
    async def test_service_wraps_transport_errors(self, backend):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        backend.handler = refuse
        forwarder = ForwarderService(BACKEND_URL, transport=backend.transport)

        with pytest.raises(BackendUnavailableError) as exc_info:
            await forwarder.forward(ProxyRequest(method="GET", path="a"))

        assert exc_info.value.target_url == f"{BACKEND_URL}/a"
        assert isinstance(exc_info.value.cause, httpx.ConnectError)


class TestSuccessPassthrough:

    def test_status_headers_and_body_relayed(self, client, backend):
        backend.handler = lambda request: httpx.Response(201, headers={"x-demo": "1"}, content=b"hello")

        response = client.get("/api/a")

        assert response.status_code == 201
        assert response.headers["x-demo"] == "1"
        assert response.content == b"hello"

    def test_repeated_response_headers_kept(self, client, backend):
        backend.handler = lambda request: httpx.Response(
            200,
            headers=[("set-cookie", "a=1"), ("set-cookie", "b=2")],
            content=b"",
        )

        response = client.get("/api/a")

        assert response.headers.get_list("set-cookie") == ["a=1", "b=2"]

    def test_error_statuses_are_relayed_not_rewritten(self, client, backend):
        backend.handler = lambda request: httpx.Response(
            404, headers={"content-type": "application/json"}, content=b'{"message":"nope"}'
        )

        response = client.get("/api/missing")

        assert response.status_code == 404
        assert response.content == b'{"message":"nope"}'
        assert response.headers["content-type"] == "application/json"

    def test_binary_body_is_byte_exact(self, client, backend):
        payload = bytes(range(256))
        backend.handler = lambda request: httpx.Response(
            200, headers={"content-type": "application/octet-stream"}, content=payload
        )

        response = client.get("/api/blob")

        assert response.content == payload
        assert response.headers["content-length"] == "256"

    def test_head_keeps_backend_content_length(self, client, backend):
        backend.handler = lambda request: httpx.Response(
            200, headers={"content-length": "1234", "x-demo": "1"}
        )

        response = client.head("/api/x")

        assert backend.requests[0].method == "HEAD"
        assert response.status_code == 200
        assert response.headers["content-length"] == "1234"
        assert response.headers["x-demo"] == "1"
        assert response.content == b""

    def test_not_modified_keeps_backend_content_length(self, client, backend):
        backend.handler = lambda request: httpx.Response(
            304, headers={"content-length": "10", "etag": '"v1"'}
        )

        response = client.get("/api/x", headers={"if-none-match": '"v1"'})

        assert response.status_code == 304
        assert response.headers["content-length"] == "10"
        assert response.headers["etag"] == '"v1"'


class TestCrossOrigin:

    def test_preflight_reaches_backend(self, client, backend):
        backend.handler = lambda request: httpx.Response(
            204, headers={"access-control-allow-origin": "https://app.example"}
        )

        response = client.options(
            "/api/a",
            headers={"Origin": "https://app.example", "Access-Control-Request-Method": "POST"},
        )

        assert len(backend.requests) == 1
        assert backend.requests[0].method == "OPTIONS"
        assert backend.requests[0].headers["origin"] == "https://app.example"
        assert response.status_code == 204
        assert response.headers["access-control-allow-origin"] == "https://app.example"

    def test_relayed_response_gets_no_cors_headers(self, client, backend):
        response = client.get("/api/a", headers={"Origin": "http://localhost:3000"})

        assert response.status_code == 200
        assert "vary" not in response.headers
        assert "access-control-allow-origin" not in response.headers

    def test_catalog_routes_still_answer_preflight(self, client, backend):
        response = client.options(
            "/catalog/updates",
            headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert backend.requests == []


class TestRelayedHeadersUntouched:

    def test_backend_tracing_headers_are_not_overwritten(self, client, backend):
        backend.handler = lambda request: httpx.Response(
            200, headers={"x-correlation-id": "backend-id", "x-process-time": "7"}, content=b"ok"
        )

        response = client.get("/api/a", headers={"X-Correlation-ID": "caller-id"})

        assert backend.requests[0].headers["x-correlation-id"] == "caller-id"
        assert response.headers["x-correlation-id"] == "backend-id"
        assert response.headers["x-process-time"] == "7"

    def test_no_local_headers_are_added(self, client, backend):
        response = client.get("/api/a")

        assert "x-correlation-id" not in response.headers
        assert "x-process-time" not in response.headers
