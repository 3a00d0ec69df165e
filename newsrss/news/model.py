from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional
from urllib.parse import urljoin, urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


@dataclass(frozen=True)
class Article:
    """A single scraped article, ready to be rendered as a feed item."""
    headline: str
    link: str  # Absolute URL, doubles as the feed item's guid
    body: str  # Raw inner markup of the article body
    date: datetime  # Aware, bound to the source's named timezone
    image: Optional[str] = None


class SourceDefinition(BaseModel):
    """Scraping rules for one news site."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Unique source name, used as cache key and feed title")
    base_url: str = Field(description="Absolute URL every relative link resolves against")
    listing_path: str = Field(description="Path of the page enumerating current articles")
    article_selector: str = Field(description="Selects each article entry on the listing page")
    headline_selector: str = Field(description="Selects the headline text within an entry")
    link_selector: str = Field(description="Selects the anchor holding the article's own URL within an entry")
    body_selector: str = Field(description="Selects the body content on the article page")
    date_selector: str = Field(description="Selects the publication date text on the article page")
    parse_date: Callable[[str], datetime] = Field(description="Maps raw date text to an aware datetime")
    image_selector: Optional[str] = Field(default=None, description="Selects a representative image on the article page")
    route_name: str = Field(default="", description="Feed route segment, served at /{route_name}.rss")
    description: str = Field(default="", description="Channel description of the rendered feed")

    @field_validator("name", "listing_path", "article_selector", "headline_selector",
                     "link_selector", "body_selector", "date_selector")
    @classmethod
    def _require_non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("image_selector")
    @classmethod
    def _require_non_empty_image_selector(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be empty when set")
        return value

    @field_validator("base_url")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"'{value}' is not an absolute http(s) URL")
        return value

    @model_validator(mode="before")
    @classmethod
    def _fill_derived_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            name = str(data.get("name") or "")
            if not data.get("route_name"):
                data["route_name"] = name.lower()
            if not data.get("description"):
                data["description"] = f"Latest articles from {name}"
        return data

    @field_validator("route_name")
    @classmethod
    def _require_route_segment(cls, value: str) -> str:
        if not value or value != value.lower() or "/" in value or " " in value:
            raise ValueError(f"route_name '{value}' must be lowercase without slashes or spaces")
        return value

    @property
    def listing_url(self) -> str:
        return self.resolve(self.listing_path)

    @property
    def feed_path(self) -> str:
        return f"/{self.route_name}.rss"

    def resolve(self, path: str) -> str:
        """Resolve a possibly relative URL against the source's base URL."""
        return urljoin(self.base_url, path)
