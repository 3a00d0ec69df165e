import asyncio
from typing import Dict, List, Optional

import pytest

from newsrss.news.dates import DateParser
from newsrss.news.errors import TransportError
from newsrss.news.model import SourceDefinition


BASE_URL = "https://news.example.com/"


class FakeFetcher:
    """In-memory stand-in for PageFetcher."""

    def __init__(
        self,
        pages: Dict[str, str],
        failures: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.pages = pages
        self.failures = failures or {}
        self.delays = delays or {}
        self.requested: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> str:
        self.requested.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, 0.01))
            if url in self.failures:
                raise self.failures[url]
            if url not in self.pages:
                raise TransportError(url, "HTTP 404", status=404)
            return self.pages[url]
        finally:
            self.in_flight -= 1


def listing_page(*entries) -> str:
    """Listing page with one li.story per (headline, href) pair; href None omits it."""
    items = []
    for headline, href in entries:
        anchor = f'<a href="{href}">Read more</a>' if href is not None else "<a>Read more</a>"
        items.append(f'<li class="story"><h2>  {headline}  </h2>{anchor}</li>')
    return f'<html><body><ul class="promo"><li>Not a story</li></ul><ul>{"".join(items)}</ul></body></html>'


def article_page(body: str, date: str, image: Optional[str] = None) -> str:
    image_tag = f'<img class="lead" src="{image}">' if image is not None else ""
    return (
        "<html><body>"
        f'<p class="byline">Posted <time>{date}</time></p>'
        f"{image_tag}"
        f'<div class="article-body">{body}</div>'
        "</body></html>"
    )


def source_definition(**overrides) -> dict:
    definition = dict(
        name="Example",
        base_url=BASE_URL,
        listing_path="/latest/",
        article_selector="li.story",
        headline_selector="h2",
        link_selector="a",
        body_selector="div.article-body",
        date_selector="time",
        parse_date=DateParser("Europe/Dublin", ["%d %B %Y %H:%M"]),
    )
    definition.update(overrides)
    return definition


def make_source(**overrides) -> SourceDefinition:
    return SourceDefinition(**source_definition(**overrides))


@pytest.fixture
def source() -> SourceDefinition:
    return make_source()


@pytest.fixture
def three_article_pages() -> Dict[str, str]:
    return {
        f"{BASE_URL}latest/": listing_page(("Alpha story", "/a"), ("Beta story", "/b"), ("Gamma story", "/c")),
        f"{BASE_URL}a": article_page("<p>Body of a</p>", "3 January 2022 14:05"),
        f"{BASE_URL}b": article_page("<p>Body of b</p>", "15 July 2022 09:30"),
        f"{BASE_URL}c": article_page("<p>Body <em>of</em> c</p>", "1 December 2022 18:00"),
    }
