import asyncio
import socket

import feedparser
import pytest
from aiohttp import test_utils

from newsrss_exec import controller
from newsrss_exec.config import parse_bind_address
from newsrss_exec.controller import run_service
from newsrss_exec.refresher import refresh_once
from newsrss_exec.server import create_app
from newsrss_exec.storage.cache import FeedCache
from conftest import BASE_URL, FakeFetcher, article_page, listing_page


class TestFeedServer:

    @pytest.mark.asyncio
    async def test_never_refreshed_source_is_not_found(self, source):
        async with test_utils.TestClient(test_utils.TestServer(create_app([source], FeedCache()))) as client:
            response = await client.get("/example.rss")

            assert response.status == 404
            assert await response.read() == b""

    @pytest.mark.asyncio
    async def test_unconfigured_route_is_not_found(self, source):
        async with test_utils.TestClient(test_utils.TestServer(create_app([source], FeedCache()))) as client:
            response = await client.get("/missing.rss")

            assert response.status == 404

    @pytest.mark.asyncio
    async def test_refreshed_source_is_served_as_rss(self, source, three_article_pages):
        cache = FeedCache()
        await refresh_once([source], cache, FakeFetcher(three_article_pages))

        async with test_utils.TestClient(test_utils.TestServer(create_app([source], cache))) as client:
            response = await client.get("/example.rss")
            body = await response.read()

        assert response.status == 200
        assert response.content_type == "application/rss+xml"
        parsed = feedparser.parse(body)
        cached = await cache.get("Example")
        assert parsed.feed.title == "Example"
        assert len(parsed.entries) == len(cached.articles)
        assert [entry.id for entry in parsed.entries] == [article.link for article in cached.articles]
        assert [entry.title for entry in parsed.entries] == ["Alpha story", "Beta story", "Gamma story"]

    @pytest.mark.asyncio
    async def test_repeated_requests_are_identical(self, source, three_article_pages):
        cache = FeedCache()
        await refresh_once([source], cache, FakeFetcher(three_article_pages))

        async with test_utils.TestClient(test_utils.TestServer(create_app([source], cache))) as client:
            first = await (await client.get("/example.rss")).read()
            second = await (await client.get("/example.rss")).read()

        assert first == second

    @pytest.mark.asyncio
    async def test_control_characters_in_scraped_text_do_not_break_the_feed(self, source):
        pages = {
            f"{BASE_URL}latest/": listing_page(("Form\x0cfeed story", "/a")),
            f"{BASE_URL}a": article_page("<p>page\x0cbreak\x1b</p>", "3 January 2022 14:05"),
        }
        cache = FeedCache()
        report = await refresh_once([source], cache, FakeFetcher(pages))

        async with test_utils.TestClient(test_utils.TestServer(create_app([source], cache))) as client:
            response = await client.get("/example.rss")
            body = await response.read()

        assert report.succeeded == {"Example": 1}
        assert response.status == 200
        assert b"<p>pagebreak</p>" in body
        assert feedparser.parse(body).entries[0].title == "Formfeed story"

class TestService:

    def test_parse_bind_address(self):
        assert parse_bind_address("0.0.0.0:3000") == ("0.0.0.0", 3000)
        assert parse_bind_address("[::1]:2048") == ("::1", 2048)

    @pytest.mark.parametrize("address", ["localhost", ":3000", "localhost:http", "localhost:70000"])
    def test_parse_bind_address_rejects_malformed(self, address):
        with pytest.raises(ValueError):
            parse_bind_address(address)

    @pytest.mark.asyncio
    async def test_bind_failure_stops_the_service(self):
        with socket.socket() as taken:
            taken.bind(("127.0.0.1", 0))
            taken.listen()
            port = taken.getsockname()[1]

            with pytest.raises(OSError):
                await run_service([], f"127.0.0.1:{port}", fetcher=FakeFetcher({}), interval_seconds=60)

    @pytest.mark.asyncio
    async def test_refresh_loop_failure_stops_the_server(self, monkeypatch):
        with socket.socket() as free:
            free.bind(("127.0.0.1", 0))
            port = free.getsockname()[1]
        server_was_up = []

        async def failing_refresh_loop(*args, **kwargs):
            await asyncio.sleep(0.2)
            _, writer = await asyncio.open_connection("127.0.0.1", port)
            server_was_up.append(True)
            writer.close()
            await writer.wait_closed()
            raise RuntimeError("refresh loop crashed")

        monkeypatch.setattr(controller, "run_refresh_loop", failing_refresh_loop)

        with pytest.raises(RuntimeError, match="refresh loop crashed"):
            await run_service([], f"127.0.0.1:{port}", fetcher=FakeFetcher({}), interval_seconds=60)

        assert server_was_up == [True]
        with socket.socket() as rebind:
            rebind.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            rebind.bind(("127.0.0.1", port))
            rebind.listen()

    @pytest.mark.asyncio
    async def test_given_fetcher_skips_opening_a_session(self, monkeypatch):
        def no_session(*args, **kwargs):
            raise AssertionError("PageFetcher should not be created when a fetcher is given")

        monkeypatch.setattr(controller, "PageFetcher", no_session)

        with socket.socket() as taken:
            taken.bind(("127.0.0.1", 0))
            taken.listen()
            port = taken.getsockname()[1]

            with pytest.raises(OSError):
                await run_service([], f"127.0.0.1:{port}", fetcher=FakeFetcher({}), interval_seconds=60)
