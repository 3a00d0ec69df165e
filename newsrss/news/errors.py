from typing import Optional


class NewsRssError(Exception):
    """Base class for every error raised while scraping or rendering a feed."""


class TransportError(NewsRssError):
    """Network failure, timeout or non-success status while fetching a page."""

    def __init__(self, url: str, message: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(f"{message} ({url})")


class MissingAttributeError(NewsRssError):
    """An element required by a source's selectors lacks the expected attribute."""

    def __init__(self, selector: str, attribute: str):
        self.selector = selector
        self.attribute = attribute
        super().__init__(f"Expected element matching '{selector}' to have a '{attribute}' attribute")


class DateParseError(NewsRssError):

    def __init__(self, text: str, reason: str = "does not match any expected pattern"):
        self.text = text
        super().__init__(f"Could not parse date '{text}': {reason}")


class FeedSerializationError(NewsRssError):
    """Feed or item construction rejected the cached articles."""
