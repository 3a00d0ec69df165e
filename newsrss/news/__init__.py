# Import core models
from .model import Article, SourceDefinition
from .errors import NewsRssError, TransportError, MissingAttributeError, DateParseError, FeedSerializationError
from .dates import DateParser

from .source.registry import NewsSourceRegistry, news_source

# Import all news sources to trigger registration
from .source import *

from .fetcher import Fetcher, PageFetcher
from .extractor import ArticleExtractor, extract_articles

__all__ = [
    "Article",
    "SourceDefinition",
    "NewsRssError",
    "TransportError",
    "MissingAttributeError",
    "DateParseError",
    "FeedSerializationError",
    "DateParser",
    "NewsSourceRegistry",
    "news_source",
    "Fetcher",
    "PageFetcher",
    "ArticleExtractor",
    "extract_articles",
]
