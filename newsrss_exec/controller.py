import asyncio
from typing import Optional, Sequence

from aiohttp import web

from newsrss.logging_config import logger
from newsrss.news.fetcher import Fetcher, PageFetcher
from newsrss.news.model import SourceDefinition
from newsrss_exec.config import CONFIG, parse_bind_address
from newsrss_exec.refresher import run_refresh_loop
from newsrss_exec.server import create_app
from newsrss_exec.storage.cache import FeedCache


async def serve_feeds(app: web.Application, host: str, port: int) -> None:
    """Serve the app until cancelled. Failing to bind raises OSError."""
    runner = web.AppRunner(app)
    await runner.setup()
    try:
        site = web.TCPSite(runner, host, port)
        await site.start()
        logger.info(f"Serving feeds on http://{host}:{port}")
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


async def run_service(
    sources: Sequence[SourceDefinition],
    address: Optional[str] = None,
    fetcher: Optional[Fetcher] = None,
    interval_seconds: Optional[float] = None,
) -> None:
    """
    Run the refresh loop and the feed server side by side, sharing one cache.

    Neither is expected to finish: as soon as one of them returns or raises, the
    other is cancelled and the failure is re-raised so the process exits.
    A PageFetcher session is opened only when no fetcher is passed in.
    """
    host, port = parse_bind_address(address or CONFIG.BIND_ADDRESS)

    if fetcher is None:
        async with PageFetcher() as page_fetcher:
            await _run_side_by_side(sources, host, port, page_fetcher, interval_seconds)
    else:
        await _run_side_by_side(sources, host, port, fetcher, interval_seconds)


async def _run_side_by_side(
    sources: Sequence[SourceDefinition],
    host: str,
    port: int,
    fetcher: Fetcher,
    interval_seconds: Optional[float],
) -> None:
    cache = FeedCache()
    tasks = [
        asyncio.create_task(serve_feeds(create_app(sources, cache), host, port), name="feed-server"),
        asyncio.create_task(
            run_refresh_loop(sources, cache, fetcher, interval_seconds),
            name="refresh-loop",
        ),
    ]
    try:
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    for task in done:
        if task.cancelled():
            continue
        error = task.exception()
        if error is not None:
            logger.error(f"❌ {task.get_name()} failed: {error}")
            raise error

    stopped = ", ".join(task.get_name() for task in done)
    raise RuntimeError(f"{stopped} stopped unexpectedly")
