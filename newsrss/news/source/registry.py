from typing import Dict, List, Optional

from newsrss.logging_config import create_logger
from newsrss.news.model import SourceDefinition


class NewsSourceRegistry:
    """Registry of the news sources the service scrapes and serves."""

    _sources: Dict[str, SourceDefinition] = {}
    logger = create_logger("NewsSourceRegistry")

    @classmethod
    def register(cls, source: SourceDefinition) -> SourceDefinition:
        """
        Register a source definition. Names and route names must be unique, since
        the name keys the feed cache and the route name keys the HTTP route.
        """
        if source.name in cls._sources:
            raise ValueError(f"News source {source.name} is already registered")

        for existing in cls._sources.values():
            if existing.route_name == source.route_name:
                raise ValueError(
                    f"News source {source.name} route '{source.route_name}' clashes with {existing.name}"
                )

        cls._sources[source.name] = source
        cls.logger.debug(f"Registered news source {source.name} at {source.feed_path}")
        return source

    @classmethod
    def unregister(cls, source_name: str) -> None:
        cls._sources.pop(source_name, None)

    @classmethod
    def get_all_sources(cls) -> List[SourceDefinition]:
        """Get all registered news sources, in registration order."""
        sources = list(cls._sources.values())
        if not sources:
            raise ValueError("No news sources registered")

        return sources

    @classmethod
    def get_source_by_name(cls, source_name: str) -> Optional[SourceDefinition]:
        """Get a news source by name, case-insensitively as a fallback."""
        source = cls._sources.get(source_name)
        if source is not None:
            return source

        for candidate in cls._sources.values():
            if candidate.name.lower() == source_name.lower():
                return candidate
        return None


def news_source(**definition) -> SourceDefinition:
    """
    Build and register a source definition in one step.

    Usage:
        EXAMPLE = news_source(
            name="Example",
            base_url="https://news.example.com/",
            listing_path="/latest/",
            article_selector="li.story",
            headline_selector="h2",
            link_selector="a",
            body_selector="div.article-body",
            date_selector="time",
            parse_date=DateParser("Europe/London", ["%d %B %Y %H:%M"]),
        )
    """
    return NewsSourceRegistry.register(SourceDefinition(**definition))
