"""
Tests for the form page fetcher, against httpx.MockTransport (no network).
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from quizexport.core.exceptions import SourceUnavailable
from quizexport.services.fetcher import FormFetcher

URL = "https://docs.google.com/forms/d/e/abc/viewscore"


def _fetcher(handler, **kwargs) -> FormFetcher:
    return FormFetcher(transport=httpx.MockTransport(handler), **kwargs)


def _run(fetcher: FormFetcher, url: str = URL) -> str:
    async def go():
        try:
            return await fetcher.fetch(url)
        finally:
            await fetcher.aclose()
    return asyncio.run(go())


class TestFormFetcher:

    def test_returns_html_and_sends_user_agent(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["ua"] = request.headers["user-agent"]
            return httpx.Response(200, text="<html>ok</html>")

        html = _run(_fetcher(handler, user_agent="QuizBot/1.0"))
        assert html == "<html>ok</html>"
        assert seen["ua"] == "QuizBot/1.0"

    def test_follows_redirects(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/viewscore"):
                return httpx.Response(302, headers={"Location": "https://docs.google.com/final"})
            return httpx.Response(200, text="final page")

        assert _run(_fetcher(handler)) == "final page"

    @pytest.mark.parametrize("status", [403, 404, 500])
    def test_http_error_status(self, status):
        fetcher = _fetcher(lambda request: httpx.Response(status))
        with pytest.raises(SourceUnavailable) as exc:
            _run(fetcher)
        assert str(status) in exc.value.message
        assert exc.value.status_code == 502

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SourceUnavailable):
            _run(_fetcher(handler))

    def test_oversized_page(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, content=b"x" * 2048), max_bytes=1024)
        with pytest.raises(SourceUnavailable) as exc:
            _run(fetcher)
        assert "too large" in exc.value.message

    def test_declared_length_rejected_before_body_is_read(self):
        pulled = []

        async def body():
            pulled.append(True)
            yield b"x" * 10

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"Content-Length": "4096"}, content=body())

        with pytest.raises(SourceUnavailable) as exc:
            _run(_fetcher(handler, max_bytes=1024))
        assert "too large" in exc.value.message
        assert pulled == []

    def test_streamed_body_cut_off_at_limit(self):
        pulled = []

        async def body():
            for _ in range(100):
                pulled.append(True)
                yield b"x" * 512

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=body())

        with pytest.raises(SourceUnavailable):
            _run(_fetcher(handler, max_bytes=1024))
        assert len(pulled) < 100

    def test_client_recreated_after_close(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, text="again"))
        assert _run(fetcher) == "again"
        assert _run(fetcher) == "again"
