"""Tests for HttpClient class."""

import httpx
import pytest

from http_shortcuts.core import ClientConfig
from http_shortcuts.http import FormData, HttpClient, HttpError, create_agents
from http_shortcuts.models import ClientResponse

BASE_URL = "https://127.0.0.1/v1/"
JSON = "application/json"


class TestHttpClientInit:
    """Test suite for HttpClient initialization."""

    @pytest.mark.asyncio
    async def test_init_default(self, base_url):
        """Test default headers and base_url from environment."""
        async with HttpClient() as client:
            assert client.headers == {"Accept": JSON, "Content-Type": JSON}
            assert client.options["base_url"] == base_url
            assert client.timeout == client.config.timeout

    @pytest.mark.asyncio
    async def test_init_custom_options(self):
        """Test custom headers merged with defaults."""
        options = {"base_url": "https://127.0.0.1/v3/", "headers": {"X-API-Key": "key"}}
        async with HttpClient(options) as client:
            assert client.headers["Accept"] == JSON
            assert client.headers["Content-Type"] == JSON
            assert client.headers["X-API-Key"] == "key"
            assert client.options["base_url"] == "https://127.0.0.1/v3/"

    @pytest.mark.asyncio
    async def test_init_custom_config(self):
        """Test custom timeout and retries."""
        config = ClientConfig(timeout=2.0, max_retries=3)
        async with HttpClient(config=config) as client:
            assert client.timeout == 2.0
            assert client.config.max_retries == 3

    @pytest.mark.asyncio
    async def test_close(self):
        client = HttpClient()
        await client.close()
        assert client.is_closed


class TestHttpClientRequests:
    """Test suite for HttpClient shortcuts."""

    @pytest.mark.asyncio
    async def test_request_returns_response(self, respx_mock, base_url):
        """Test raw request resolves to full response."""
        respx_mock.get(f"{BASE_URL}users").mock(
            return_value=httpx.Response(200, json={"data": []})
        )

        async with HttpClient() as client:
            response = await client.request({"url": "/users"})

        assert isinstance(response, ClientResponse)
        assert response.status == 200
        assert response.data == {"data": []}

    @pytest.mark.asyncio
    async def test_client_base_url_option(self, respx_mock):
        """Test base_url given to the client is used by requests."""
        route = respx_mock.get("https://127.0.0.1/v3/users").mock(
            return_value=httpx.Response(200, json=[])
        )

        async with HttpClient({"base_url": "https://127.0.0.1/v3/"}) as client:
            assert await client.get("/users") == []

        assert route.called

    @pytest.mark.asyncio
    async def test_request_base_url_overrides_client(self, respx_mock, base_url):
        """Test multiple endpoints with a single client."""
        route = respx_mock.get("https://other.local/api/roles").mock(
            return_value=httpx.Response(200, json=[])
        )

        async with HttpClient() as client:
            await client.get("/roles", {"base_url": "https://other.local/api"})

        assert route.called

    @pytest.mark.asyncio
    async def test_get_sends_default_and_custom_headers(self, respx_mock, base_url):
        """Test headers and params sent on GET."""
        route = respx_mock.get(f"{BASE_URL}users").mock(
            return_value=httpx.Response(200, json={"data": []})
        )

        async with HttpClient({"headers": {"X-API-Key": "key"}}) as client:
            users = await client.get("/users", {"params": {"age": 11}})

        assert users == {"data": []}
        sent = route.calls.last.request
        assert sent.headers["accept"] == JSON
        assert sent.headers["x-api-key"] == "key"
        assert sent.url.params["age"] == "11"

    @pytest.mark.asyncio
    async def test_post_json(self, respx_mock, base_url):
        """Test POST encodes mappings as JSON."""
        route = respx_mock.post(f"{BASE_URL}users").mock(
            return_value=httpx.Response(201, json={"age": 11})
        )

        async with HttpClient() as client:
            user = await client.post("/users", {"age": 11})

        assert user == {"age": 11}
        sent = route.calls.last.request
        assert sent.headers["content-type"] == JSON
        assert sent.content == b'{"age":11}' or sent.content == b'{"age": 11}'

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["post", "put", "patch", "send_file"])
    @pytest.mark.parametrize("payload", [None, {}, [], "", FormData()])
    async def test_missing_payload(self, respx_mock, base_url, method, payload):
        """Test empty payload rejected before any network I/O."""
        async with HttpClient() as client:
            with pytest.raises(HttpError) as exc_info:
                await getattr(client, method)("/users", payload)

        assert exc_info.value.message == "Missing Payload"
        assert exc_info.value.status == 400
        assert respx_mock.calls.call_count == 0

    @pytest.mark.asyncio
    async def test_post_multipart_flag(self, respx_mock, base_url):
        """Test mapping sent as multipart with multipart option."""
        route = respx_mock.post(f"{BASE_URL}users").mock(
            return_value=httpx.Response(201, json={"age": 11})
        )

        async with HttpClient() as client:
            await client.post("/users", {"age": 11}, {"multipart": True})

        sent = route.calls.last.request
        assert sent.headers["content-type"].startswith("multipart/form-data; boundary")
        assert b'name="age"' in sent.content

    @pytest.mark.asyncio
    async def test_patch_multipart_header(self, respx_mock, base_url):
        """Test multipart detected from Content-Type header."""
        route = respx_mock.patch(f"{BASE_URL}users").mock(
            return_value=httpx.Response(200, json={"age": 11})
        )
        headers = {"Content-Type": "multipart/form-data"}

        async with HttpClient() as client:
            await client.patch("/users", {"age": 11}, {"headers": headers})

        sent = route.calls.last.request
        assert sent.headers["content-type"].startswith("multipart/form-data; boundary")

    @pytest.mark.asyncio
    async def test_post_encoded_multipart_body(self, respx_mock, base_url):
        """Test pre-encoded multipart body sent with its own boundary."""
        route = respx_mock.post(f"{BASE_URL}files").mock(
            return_value=httpx.Response(201, json={"ok": True})
        )
        headers = {"Content-Type": "multipart/form-data; boundary=abc"}
        body = b'--abc\r\nContent-Disposition: form-data; name="age"\r\n\r\n11\r\n--abc--\r\n'

        async with HttpClient() as client:
            await client.post("/files", body, {"headers": headers})

        sent = route.calls.last.request
        assert sent.headers["content-type"] == "multipart/form-data; boundary=abc"
        assert sent.content == body

    @pytest.mark.asyncio
    async def test_send_file_bytes(self, respx_mock, base_url):
        """Test file upload as multipart."""
        route = respx_mock.post(f"{BASE_URL}files").mock(
            return_value=httpx.Response(201, json={"name": "image.png"})
        )

        async with HttpClient() as client:
            file = await client.send_file("/files", {"image": b"\x89PNG"})

        assert file == {"name": "image.png"}
        sent = route.calls.last.request
        assert sent.headers["content-type"].startswith("multipart/form-data; boundary")
        assert b'filename="image"' in sent.content

    @pytest.mark.asyncio
    async def test_send_file_custom_method(self, respx_mock, base_url):
        """Test send_file with method override."""
        route = respx_mock.patch(f"{BASE_URL}files/5c1766243").mock(
            return_value=httpx.Response(200, json={})
        )

        async with HttpClient() as client:
            await client.send_file("/files/5c1766243", {"image": b"img"}, {"method": "PATCH"})

        assert route.called

    @pytest.mark.asyncio
    async def test_fetch_file_stream(self, respx_mock, base_url):
        """Test file download in stream mode."""
        respx_mock.get(f"{BASE_URL}files/5c1766243").mock(
            return_value=httpx.Response(200, content=b"\x89PNG")
        )

        async with HttpClient() as client:
            stream = await client.fetch_file("/files/5c1766243")
            content = b"".join([chunk async for chunk in stream.aiter_bytes()])
            await stream.aclose()

        assert content == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_head_returns_response(self, respx_mock, base_url):
        """Test HEAD resolves to the full response."""
        respx_mock.head(f"{BASE_URL}users/5c1766243").mock(
            return_value=httpx.Response(200, headers={"Content-Type": JSON})
        )

        async with HttpClient() as client:
            response = await client.head("/users/5c1766243")

        assert isinstance(response, ClientResponse)
        assert response.headers["content-type"] == JSON
        assert response.data is None

    @pytest.mark.asyncio
    async def test_text_response_type(self, respx_mock, base_url):
        respx_mock.get(f"{BASE_URL}health").mock(return_value=httpx.Response(200, text="ok"))

        async with HttpClient() as client:
            assert await client.get("/health", {"response_type": "text"}) == "ok"

    @pytest.mark.asyncio
    async def test_json_falls_back_to_text(self, respx_mock, base_url):
        """Test non-JSON bodies returned as text."""
        respx_mock.get(f"{BASE_URL}health").mock(return_value=httpx.Response(200, text="ok"))

        async with HttpClient() as client:
            assert await client.get("/health") == "ok"


class TestHttpClientErrors:
    """Test suite for normalized errors raised by HttpClient."""

    @pytest.mark.asyncio
    async def test_server_error(self, respx_mock, base_url):
        """Test error response mirrors server status and message."""
        respx_mock.get(f"{BASE_URL}users/1").mock(
            return_value=httpx.Response(404, json={"message": "User Not Found"})
        )

        async with HttpClient() as client:
            with pytest.raises(HttpError) as exc_info:
                await client.get("/users/1")

        error = exc_info.value
        assert error.status == 404
        assert error.code == 404
        assert error.message == "User Not Found"
        assert error.description == "User Not Found"
        assert isinstance(error.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_server_error_in_stream_mode(self, respx_mock, base_url):
        """Test error body is read before normalizing in stream mode."""
        respx_mock.get(f"{BASE_URL}files/1").mock(
            return_value=httpx.Response(410, json={"message": "File Removed"})
        )

        async with HttpClient() as client:
            with pytest.raises(HttpError) as exc_info:
                await client.fetch_file("/files/1")

        assert exc_info.value.status == 410
        assert exc_info.value.message == "File Removed"

    @pytest.mark.asyncio
    async def test_connection_error(self, respx_mock, base_url):
        """Test no response from server maps to 503."""
        respx_mock.get(f"{BASE_URL}users").mock(side_effect=httpx.ConnectError)

        async with HttpClient() as client:
            with pytest.raises(HttpError) as exc_info:
                await client.get("/users")

        assert exc_info.value.status == 503
        assert exc_info.value.description == "Service Unavailable"

    @pytest.mark.asyncio
    async def test_missing_base_url(self):
        """Test relative URL without base_url is a setup error."""
        async with HttpClient() as client:
            with pytest.raises(HttpError) as exc_info:
                await client.get("/users")

        assert exc_info.value.status == 400
        assert exc_info.value.description == "Bad Request"

    @pytest.mark.asyncio
    async def test_retries_server_errors(self, respx_mock, base_url):
        """Test retry on 503 when max_retries > 1."""
        route = respx_mock.get(f"{BASE_URL}users").mock(
            side_effect=[httpx.Response(503), httpx.Response(200, json=[])]
        )

        async with HttpClient({"max_retries": 2}) as client:
            assert await client.get("/users") == []

        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_no_retry_on_client_error(self, respx_mock, base_url):
        """Test 4xx (other than 408/429) is not retried."""
        route = respx_mock.get(f"{BASE_URL}users").mock(return_value=httpx.Response(400))

        async with HttpClient({"max_retries": 3}) as client:
            with pytest.raises(HttpError):
                await client.get("/users")

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_should_retry_status_error(self):
        """Test retry decision for HTTP status codes."""
        async with HttpClient() as client:
            decisions = {
                status: client._should_retry_status_error(status)
                for status in (500, 503, 429, 408, 404, 400)
            }

        assert decisions == {
            500: True,
            503: True,
            429: True,
            408: True,
            404: False,
            400: False,
        }


class TestAgents:
    """Test suite for transports built from agent options."""

    def test_no_agent_options(self):
        assert create_agents({}) is None
        assert create_agents(None) is None

    def test_agent_options_create_transport(self):
        """Test transport created when agent options are given."""
        transport = create_agents({"agent_options": {"keep_alive": False}})
        assert isinstance(transport, httpx.AsyncHTTPTransport)

    @pytest.mark.asyncio
    async def test_request_with_agent(self, respx_mock, base_url):
        """Test request sent through a dedicated transport."""
        route = respx_mock.get(f"{BASE_URL}users").mock(
            return_value=httpx.Response(200, json={"data": []})
        )

        async with HttpClient() as client:
            users = await client.get("/users", {"agent_options": {"keep_alive": True}})

        assert users == {"data": []}
        assert route.called

    @pytest.mark.asyncio
    async def test_invalid_certificate_path(self, respx_mock, base_url, tmp_path):
        """Test unreadable CA file is a setup error."""
        agent_options = {"ca": str(tmp_path / "missing.pem")}

        async with HttpClient() as client:
            with pytest.raises(HttpError) as exc_info:
                await client.get("/users", {"agent_options": agent_options})

        assert exc_info.value.status == 400
