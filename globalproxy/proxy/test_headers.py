from starlette.datastructures import Headers, MutableHeaders

from globalproxy.proxy.headers import (
    CORS_HEADERS,
    filter_headers,
    finish_headers,
    prepare_headers,
    reserved_prefix_filter,
)


class TestReservedPrefixFilter:
    def test_cloudflare_prefix(self):
        keep = reserved_prefix_filter(["cf-"])
        assert keep("cf-ray") is False
        assert keep("CF-Connecting-IP") is False
        assert keep("x-custom") is True

    def test_prefix_must_lead(self):
        keep = reserved_prefix_filter(["cf-"])
        assert keep("x-cf-ray") is True

    def test_multiple_prefixes(self):
        keep = reserved_prefix_filter(["cf-", "X-Vercel-"])
        assert keep("x-vercel-id") is False
        assert keep("cf-ipcountry") is False
        assert keep("accept") is True

    def test_no_prefixes_keeps_everything(self):
        keep = reserved_prefix_filter([])
        assert keep("cf-ray") is True


class TestFilterHeaders:
    """Reserved headers are dropped, everything else forwarded unchanged."""

    def test_mapping_input(self):
        result = filter_headers(
            {"cf-ray": "abc", "user-agent": "test-agent", "Accept": "text/html"},
            reserved_prefix_filter(["cf-"]),
        )
        assert result == [("user-agent", "test-agent"), ("Accept", "text/html")]

    def test_repeated_headers_kept(self):
        headers = Headers(raw=[(b"cookie", b"a=1"), (b"cookie", b"b=2"), (b"cf-visitor", b"{}")])
        result = filter_headers(headers, reserved_prefix_filter(["cf-"]))
        assert result == [("cookie", "a=1"), ("cookie", "b=2")]

    def test_custom_predicate(self):
        result = filter_headers(
            [("x-keep", "1"), ("x-drop", "2")], lambda name: name != "x-drop"
        )
        assert result == [("x-keep", "1")]

    def test_input_not_mutated(self):
        original = {"cf-ray": "abc", "accept": "*/*"}
        filter_headers(original, reserved_prefix_filter(["cf-"]))
        assert original == {"cf-ray": "abc", "accept": "*/*"}


class TestPrepareHeaders:
    def test_transport_headers_removed(self):
        result = prepare_headers(
            [
                ("Host", "proxy.example.com"),
                ("connection", "keep-alive"),
                ("transfer-encoding", "chunked"),
                ("upgrade", "websocket"),
                ("user-agent", "test-agent"),
                ("content-length", "12"),
            ]
        )
        assert result == [("user-agent", "test-agent"), ("content-length", "12")]


class TestFinishHeaders:
    def test_headers_added(self):
        headers = MutableHeaders()
        finish_headers(headers)
        assert headers["cache-control"] == "no-store"
        assert headers["access-control-allow-origin"] == "*"
        assert headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE"
        assert headers["access-control-allow-headers"] == "*"

    def test_existing_values_overwritten(self):
        headers = MutableHeaders(
            raw=[
                (b"cache-control", b"max-age=60"),
                (b"cache-control", b"public"),
                (b"access-control-allow-origin", b"https://only.example.com"),
            ]
        )
        finish_headers(headers)
        assert headers.getlist("cache-control") == ["no-store"]
        assert headers.getlist("access-control-allow-origin") == ["*"]

    def test_other_headers_untouched(self):
        headers = MutableHeaders(
            raw=[
                (b"content-type", b"text/plain"),
                (b"set-cookie", b"a=1"),
                (b"set-cookie", b"b=2"),
            ]
        )
        finish_headers(headers)
        assert headers["content-type"] == "text/plain"
        assert headers.getlist("set-cookie") == ["a=1", "b=2"]
        assert len(headers.raw) == 3 + 1 + len(CORS_HEADERS)

    def test_plain_dict(self):
        headers = {}
        finish_headers(headers)
        assert headers["Cache-Control"] == "no-store"
        assert headers["Access-Control-Allow-Origin"] == "*"
