from typing import Sequence

from aiohttp import web

from newsrss.feed.builder import RSS_CONTENT_TYPE, build_feed
from newsrss.logging_config import create_logger
from newsrss.news.model import SourceDefinition
from newsrss_exec.storage.cache import FeedCache


logger = create_logger("FeedServer")

FEED_CACHE_KEY = web.AppKey("feed_cache", FeedCache)


def feed_handler(source: SourceDefinition):
    """Build the request handler serving one source's cached articles."""

    async def handle(request: web.Request) -> web.Response:
        logger.debug(f"Feed requested for {source.name}")
        cached = await request.app[FEED_CACHE_KEY].get(source.name)

        if cached is None:
            logger.debug(f"Feed for {source.name} not found in cache")
            return web.Response(status=404)

        body = build_feed(source, cached.articles, built_at=cached.updated_at)
        return web.Response(body=body, content_type=RSS_CONTENT_TYPE, charset="utf-8")

    return handle


def create_app(sources: Sequence[SourceDefinition], cache: FeedCache) -> web.Application:
    """Create the feed application with one GET /{route_name}.rss route per source."""
    app = web.Application()
    app[FEED_CACHE_KEY] = cache

    for source in sources:
        app.router.add_get(source.feed_path, feed_handler(source))
        logger.debug(f"Serving {source.name} at {source.feed_path}")

    return app
