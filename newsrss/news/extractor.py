import asyncio
import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from newsrss.config import CONFIG
from newsrss.logging_config import create_logger
from newsrss.news.errors import DateParseError, MissingAttributeError
from newsrss.news.fetcher import Fetcher
from newsrss.news.model import Article, SourceDefinition


# Code points XML 1.0 cannot carry, even inside CDATA
XML_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def _xml_safe(text: str) -> str:
    return XML_ILLEGAL_CHARS.sub("", text)


def _select_text(node: Tag, selector: str) -> str:
    """Concatenated text of every element matching the selector."""
    return "".join(element.get_text() for element in node.select(selector))


def _select_attribute(node: Tag, selector: str, attribute: str) -> str:
    """Attribute of the first element matching the selector."""
    element = node.select_one(selector)
    value = element.get(attribute) if element is not None else None
    if isinstance(value, list):
        value = " ".join(value)
    if value is None:
        raise MissingAttributeError(selector, attribute)
    return value


class ArticleExtractor:
    """
    Turns a source's listing page into its current articles.

    The listing page is fetched first; every entry's article page is then
    fetched concurrently (bounded by max_concurrency) and the results are
    returned in listing order. Any failure aborts the whole source: the first
    error propagates, outstanding fetches are cancelled and no partial list is
    returned.
    """

    def __init__(self, fetcher: Fetcher, max_concurrency: Optional[int] = None):
        self.fetcher = fetcher
        self.max_concurrency = CONFIG.FETCH_MAX_CONCURRENCY if max_concurrency is None else max_concurrency
        self.logger = create_logger("ArticleExtractor")

    async def extract(self, source: SourceDefinition) -> List[Article]:
        listing_url = source.listing_url
        self.logger.debug(f"[{source.name}] Fetching listing page {listing_url}")

        listing = BeautifulSoup(await self.fetcher.fetch(listing_url), "html.parser")
        entries = [self._read_entry(source, entry) for entry in listing.select(source.article_selector)]
        self.logger.debug(f"[{source.name}] Found {len(entries)} article entries on listing page")

        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None
        tasks = [
            asyncio.create_task(self._fetch_article(source, headline, link, semaphore))
            for headline, link in entries
        ]

        try:
            # gather keeps results in task order, i.e. listing order
            articles = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        self.logger.info(f"[{source.name}] Extracted {len(articles)} articles")
        return list(articles)

    def _read_entry(self, source: SourceDefinition, entry: Tag) -> Tuple[str, str]:
        headline = _xml_safe(_select_text(entry, source.headline_selector)).strip()
        href = _select_attribute(entry, source.link_selector, "href")
        return headline, source.resolve(href)

    async def _fetch_article(
        self,
        source: SourceDefinition,
        headline: str,
        link: str,
        semaphore: Optional[asyncio.Semaphore],
    ) -> Article:
        self.logger.debug(f"[{source.name}] Fetching article {link}")
        if semaphore is None:
            html = await self.fetcher.fetch(link)
        else:
            async with semaphore:
                html = await self.fetcher.fetch(link)

        document = BeautifulSoup(html, "html.parser")

        body_element = document.select_one(source.body_selector)
        body = _xml_safe(body_element.decode_contents()) if body_element is not None else ""

        image = None
        if source.image_selector is not None:
            image = urljoin(link, _select_attribute(document, source.image_selector, "src"))

        date_text = _select_text(document, source.date_selector)
        try:
            date = source.parse_date(date_text)
        except DateParseError:
            raise
        except ValueError as e:
            raise DateParseError(date_text.strip(), str(e)) from e
        if date.tzinfo is None:
            raise DateParseError(date_text.strip(), "parser returned a datetime without a timezone")

        return Article(headline=headline, link=link, body=body, date=date, image=image)


async def extract_articles(
    source: SourceDefinition,
    fetcher: Fetcher,
    max_concurrency: Optional[int] = None,
) -> List[Article]:
    """Extract the current articles of a source, all-or-nothing."""
    return await ArticleExtractor(fetcher, max_concurrency).extract(source)
