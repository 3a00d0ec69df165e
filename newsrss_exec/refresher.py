import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from newsrss.logging_config import create_logger
from newsrss.news.extractor import ArticleExtractor
from newsrss.news.fetcher import Fetcher
from newsrss.news.model import SourceDefinition
from newsrss_exec.config import CONFIG
from newsrss_exec.storage.cache import FeedCache


logger = create_logger("Refresher")


@dataclass
class RefreshReport:
    """Outcome of one refresh cycle."""
    succeeded: Dict[str, int] = field(default_factory=dict)  # source name -> article count
    failed: Dict[str, BaseException] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


async def refresh_once(
    sources: Sequence[SourceDefinition],
    cache: FeedCache,
    fetcher: Fetcher,
    max_concurrency: Optional[int] = None,
) -> RefreshReport:
    """
    Scrape every source concurrently and commit each success to the cache.

    Sources are isolated from each other: a failing source is logged and keeps
    its previous cache entry while the others are still committed.
    """
    extractor = ArticleExtractor(fetcher, max_concurrency)
    results = await asyncio.gather(
        *(extractor.extract(source) for source in sources),
        return_exceptions=True,
    )

    report = RefreshReport()
    for source, result in zip(sources, results):
        if isinstance(result, asyncio.CancelledError):
            raise result
        if isinstance(result, BaseException):
            logger.error(f"Refreshing {source.name} failed, keeping previous articles: {result}")
            report.failed[source.name] = result
            continue

        await cache.replace(source.name, result)
        report.succeeded[source.name] = len(result)

    return report


async def run_refresh_loop(
    sources: Sequence[SourceDefinition],
    cache: FeedCache,
    fetcher: Fetcher,
    interval_seconds: Optional[float] = None,
    max_cycles: Optional[int] = None,
) -> List[RefreshReport]:
    """
    Refresh all sources, then sleep for the interval, forever.

    max_cycles stops the loop after that many cycles; it exists for tests and
    one-off runs, the service runs with no limit.
    """
    interval = CONFIG.REFRESH_INTERVAL_SECONDS if interval_seconds is None else interval_seconds
    reports: List[RefreshReport] = []
    cycle = 0

    while max_cycles is None or cycle < max_cycles:
        cycle += 1
        logger.info(f"Starting refresh cycle {cycle} for {len(sources)} sources")

        report = await refresh_once(sources, cache, fetcher)
        if max_cycles is not None:
            reports.append(report)

        logger.info(
            f"Refresh cycle {cycle} finished: {len(report.succeeded)} succeeded {report.succeeded}, "
            f"{len(report.failed)} failed {list(report.failed)}"
        )

        if max_cycles is not None and cycle >= max_cycles:
            break
        await asyncio.sleep(interval)

    return reports
