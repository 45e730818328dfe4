"""Tests for the Conductor HTTP fetcher."""

import httpx
import pytest

from yanductor.api.fetcher import RemoteFetcher
from yanductor.errors import NetworkError


def _fetcher(handler, base_url: str = "https://conductor.example.com", names=("web", "infra")):
    return RemoteFetcher(base_url, list(names), transport=httpx.MockTransport(handler))


class TestUrl:
    def test_builds_generator_url(self) -> None:
        fetcher = RemoteFetcher("https://conductor.example.com", ["web", "infra"])
        assert fetcher.url == (
            "https://conductor.example.com/api/generator/rivik.ansible-inventory?projects=web,infra"
        )

    def test_strips_trailing_slash(self) -> None:
        fetcher = RemoteFetcher("https://conductor.example.com/", ["web"])
        assert fetcher.url.startswith("https://conductor.example.com/api/generator/")


class TestFetch:
    def test_returns_body_verbatim(self, inventory_bytes: bytes) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=inventory_bytes)

        assert _fetcher(handler).fetch() == inventory_bytes
        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert seen[0].url.path == "/api/generator/rivik.ansible-inventory"
        assert seen[0].url.params["projects"] == "web,infra"

    def test_non_200_is_network_error(self) -> None:
        fetcher = _fetcher(lambda request: httpx.Response(500, content=b"boom"))
        with pytest.raises(NetworkError, match="status code 500") as exc_info:
            fetcher.fetch()
        assert exc_info.value.status_code == 500
        assert exc_info.value.url == fetcher.url

    def test_other_2xx_is_error(self) -> None:
        fetcher = _fetcher(lambda request: httpx.Response(204))
        with pytest.raises(NetworkError) as exc_info:
            fetcher.fetch()
        assert exc_info.value.status_code == 204

    def test_transport_failure_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError, match="ConnectError") as exc_info:
            _fetcher(handler).fetch()
        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_timeout_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(NetworkError):
            _fetcher(handler).fetch()

    def test_single_request_no_retry(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        with pytest.raises(NetworkError):
            _fetcher(handler).fetch()
        assert len(calls) == 1


class TestRedirects:
    def test_follows_redirect_to_final_200(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            if request.url.scheme == "http":
                location = str(request.url.copy_with(scheme="https"))
                return httpx.Response(301, headers={"Location": location})
            return httpx.Response(200, content=b"{}")

        fetcher = _fetcher(handler, base_url="http://c.example.com", names=["web"])
        assert fetcher.fetch() == b"{}"
        assert len(seen) == 2
        assert seen[1].startswith("https://c.example.com/api/generator/")

    def test_redirect_to_error_status_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/moved":
                return httpx.Response(404)
            return httpx.Response(302, headers={"Location": "https://c.example.com/moved"})

        with pytest.raises(NetworkError) as exc_info:
            _fetcher(handler).fetch()
        assert exc_info.value.status_code == 404

    def test_redirect_loop_is_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        with pytest.raises(NetworkError, match="TooManyRedirects"):
            _fetcher(handler).fetch()
