from datetime import datetime, timezone
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from newsrss.logging_config import create_logger
from newsrss.news.errors import DateParseError


logger = create_logger("DateParser")


class DateParser:
    """
    Parses the publication date text of one source into an aware datetime.

    Each source configures its own instance with the strptime formats its pages
    use and the named timezone those wall-clock times are in. Sources whose pages
    sometimes carry no usable date can opt into falling back to the current time
    instead of failing.
    """

    def __init__(self, timezone_name: str, formats: Sequence[str], fallback_to_now: bool = False):
        if not formats:
            raise ValueError("DateParser requires at least one date format")
        self.timezone = ZoneInfo(timezone_name)
        self.formats = tuple(formats)
        self.fallback_to_now = fallback_to_now

    def __call__(self, text: str) -> datetime:
        cleaned = text.strip()
        naive = self._parse_naive(cleaned)

        if naive is None:
            if not self.fallback_to_now:
                raise DateParseError(cleaned)
            logger.warning(f"Could not parse date '{cleaned}', using current time in {self.timezone.key}")
            naive = self.now().replace(tzinfo=None, microsecond=0)

        return self.localize(naive)

    def __repr__(self) -> str:
        return f"DateParser(timezone={self.timezone.key!r}, formats={self.formats!r})"

    def now(self) -> datetime:
        return datetime.now(self.timezone)

    def localize(self, naive: datetime) -> datetime:
        """Attach the parser's zone to a wall-clock time, picking the earliest instant when ambiguous."""
        aware = naive.replace(tzinfo=self.timezone, fold=0)

        # Wall times inside a DST gap do not survive a round trip through UTC
        round_trip = aware.astimezone(timezone.utc).astimezone(self.timezone)
        if round_trip.replace(tzinfo=None) != naive:
            raise DateParseError(naive.isoformat(), f"local time does not exist in {self.timezone.key}")

        return aware

    def _parse_naive(self, text: str) -> Optional[datetime]:
        for date_format in self.formats:
            try:
                return datetime.strptime(text, date_format)
            except ValueError:
                continue
        return None
