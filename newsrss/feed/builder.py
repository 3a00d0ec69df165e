from datetime import datetime
from typing import Optional, Sequence

from feedgen.feed import FeedGenerator

from newsrss.news.errors import FeedSerializationError
from newsrss.news.model import Article, SourceDefinition


RSS_CONTENT_TYPE = "application/rss+xml"


def build_feed(
    source: SourceDefinition,
    articles: Sequence[Article],
    built_at: Optional[datetime] = None,
) -> bytes:
    """
    Render a source's articles as an RSS 2.0 document, one item per article in
    the given order.

    Args:
        source: The source the articles were scraped from; its name is the channel title
        articles: Articles in the order they should appear in the feed
        built_at: Aware datetime reported as lastBuildDate. Passing the time the
            articles were cached keeps repeated renders byte-identical.

    Returns:
        The UTF-8 encoded feed document
    """
    try:
        feed = FeedGenerator()
        feed.title(source.name)
        feed.link(href=source.base_url, rel="alternate")
        feed.description(source.description)
        if built_at is not None:
            feed.lastBuildDate(built_at)

        for article in articles:
            entry = feed.add_entry(order="append")
            entry.title(article.headline)
            entry.link(href=article.link)
            entry.guid(article.link, permalink=True)
            entry.pubDate(article.date)
            if article.body:
                # Without a description feedgen writes content into <description> instead of content:encoded
                entry.description(article.headline or article.link)
                entry.content(article.body, type="CDATA")

        return feed.rss_str(pretty=True)

    except ValueError as e:
        raise FeedSerializationError(f"Could not render feed for {source.name}: {e}") from e
