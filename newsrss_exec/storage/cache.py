import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from newsrss.news.model import Article


@dataclass(frozen=True)
class CachedFeed:
    """The articles of one successful refresh of a source."""
    source_name: str
    articles: Tuple[Article, ...]
    updated_at: datetime


class FeedCache:
    """
    Latest articles per source, shared by the refresh loop (single writer) and
    the feed server (many readers).

    Entries are immutable snapshots replaced wholesale under a lock, so a reader
    sees either the previous cycle's articles or the new ones, never a mix.
    A source that was never refreshed has no entry at all, which is different
    from an entry with no articles.
    """

    def __init__(self):
        self._feeds: Dict[str, CachedFeed] = {}
        self._lock = asyncio.Lock()

    async def replace(self, source_name: str, articles: Sequence[Article]) -> CachedFeed:
        cached = CachedFeed(
            source_name=source_name,
            articles=tuple(articles),
            updated_at=datetime.now(timezone.utc).replace(microsecond=0),
        )
        async with self._lock:
            self._feeds[source_name] = cached
        return cached

    async def get(self, source_name: str) -> Optional[CachedFeed]:
        async with self._lock:
            return self._feeds.get(source_name)

    async def names(self) -> List[str]:
        async with self._lock:
            return list(self._feeds)
