import logging
import math
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from newest_validator.models import Item, RawItem

logger = logging.getLogger(__name__)

# Hacker News listing markup
ROW_SELECTOR = "tr.athing"
TITLE_SELECTOR = ".titleline > a"
AGE_SELECTOR = "span.age"
MORE_LINK_SELECTOR = "a.morelink"

_DIGITS_RE = re.compile(r"^\d+$")


class ListingParser:
    @staticmethod
    def clean_text(text: str) -> str:
        text = re.sub(r'[\r\n\t]+', ' ', text)
        return re.sub(r'\s+', ' ', text).strip()

    @staticmethod
    def parse_timestamp_ms(age_title: Optional[str]) -> Optional[int]:
        """Turn a `span.age` title such as "2024-05-01T12:00:00 1714564800" into epoch ms.

        The trailing token carries UNIX seconds. Older markup only has the ISO
        part, which is read as UTC.
        """
        tokens = age_title.split() if age_title else []
        if not tokens:
            return None
        if _DIGITS_RE.match(tokens[-1]):
            return int(tokens[-1]) * 1000
        try:
            parsed = datetime.fromisoformat(tokens[0])
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return int(parsed.timestamp()) * 1000

    @staticmethod
    def find_age(soup: BeautifulSoup, row: Tag) -> Optional[Tag]:
        row_id = row.get("id")
        if row_id:
            score = soup.find(id=f"score_{row_id}")
            if score is not None and score.parent is not None:
                age = score.parent.select_one(AGE_SELECTOR)
                if age is not None:
                    return age
        # Items without a score (jobs, fresh posts) still carry a subtext row
        subtext_row = row.find_next_sibling("tr")
        if subtext_row is None:
            return None
        return subtext_row.select_one(AGE_SELECTOR)

    @staticmethod
    def parse_listing(html: str, parser: str = "lxml") -> List[RawItem]:
        soup = BeautifulSoup(html, parser)
        raw_items = []
        for row in soup.select(ROW_SELECTOR):
            title_el = row.select_one(TITLE_SELECTOR)
            age_el = ListingParser.find_age(soup, row)
            raw_items.append(RawItem(
                id=row.get("id"),
                title=ListingParser.clean_text(title_el.get_text()) if title_el else None,
                timestamp_ms=ListingParser.parse_timestamp_ms(age_el.get("title")) if age_el else None,
            ))
        return raw_items

    @staticmethod
    def more_link(html: str, parser: str = "lxml") -> Optional[str]:
        soup = BeautifulSoup(html, parser)
        link = soup.select_one(MORE_LINK_SELECTOR)
        if link is None:
            return None
        return link.get("href") or None


def coerce_timestamp_ms(value) -> Optional[int]:
    """Return `value` as an int if it is a finite, non-negative whole number, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value < 0:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value)
    if isinstance(value, str) and _DIGITS_RE.match(value.strip()):
        return int(value.strip())
    return None


def admit(raw: RawItem) -> Optional[Item]:
    title = raw.title.strip() if raw.title else ""
    timestamp_ms = coerce_timestamp_ms(raw.timestamp_ms)
    if not title or timestamp_ms is None:
        logger.debug("Dropping incomplete row %r (title=%r, timestamp=%r)", raw.id, raw.title, raw.timestamp_ms)
        return None
    return Item(id=raw.id or "", title=title, timestamp_ms=timestamp_ms)


def admit_all(raw_items: Iterable[RawItem]) -> List[Item]:
    items = []
    for raw in raw_items:
        item = admit(raw)
        if item is not None:
            items.append(item)
    return items
