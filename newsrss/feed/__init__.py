from .builder import build_feed, RSS_CONTENT_TYPE

__all__ = [
    "build_feed",
    "RSS_CONTENT_TYPE",
]
