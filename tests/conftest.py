"""Shared fakes: an in-memory listing source and Hacker News markup builders."""

from typing import List, Optional

import pytest

from newest_validator.errors import NoMoreItems
from newest_validator.models import Item, RawItem


class FakeSource:
    """Serves one batch per page; `load_more()` advances until batches run out."""

    def __init__(self, batches: List[List[RawItem]]):
        self.batches = batches
        self.page = 0
        self.load_more_calls = 0
        self.extract_calls = 0
        self.navigated: List[str] = []
        self.closed = False
        self.events: List[str] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def navigate(self, url: str) -> None:
        self.navigated.append(url)
        self.events.append("navigate")

    async def extract_visible_items(self) -> List[RawItem]:
        self.extract_calls += 1
        self.events.append("extract")
        return list(self.batches[self.page])

    async def load_more(self) -> None:
        self.events.append("load_more")
        if self.page + 1 >= len(self.batches):
            raise NoMoreItems("no 'More' link")
        self.load_more_calls += 1
        self.page += 1

    async def close(self) -> None:
        self.closed = True
        self.events.append("close")


def raw(item_id: str, timestamp_ms, title: Optional[str] = None) -> RawItem:
    return RawItem(id=item_id, title=f"Story {item_id}" if title is None else title, timestamp_ms=timestamp_ms)


def item(item_id: str, timestamp_ms: int, title: Optional[str] = None) -> Item:
    return Item(id=item_id, title=title or f"Story {item_id}", timestamp_ms=timestamp_ms)


def descending_batches(total: int, per_page: int, start_ms: int = 1_714_564_800_000) -> List[List[RawItem]]:
    """`total` well-formed rows, one minute apart and newest first, split into pages."""
    rows = [raw(str(i), start_ms - i * 60_000) for i in range(total)]
    return [rows[i:i + per_page] for i in range(0, total, per_page)]


def hn_row(item_id: str, title: str, unix_seconds: Optional[int], with_score: bool = True) -> str:
    score = (
        f'<span class="score" id="score_{item_id}">1 point</span> by '
        f'<a href="user?id=someone" class="hnuser">someone</a> '
    ) if with_score else ""
    age = (
        f'<span class="age" title="2024-05-01T12:00:00 {unix_seconds}">'
        f'<a href="item?id={item_id}">1 minute ago</a></span>'
    ) if unix_seconds is not None else ""
    return (
        f'<tr class="athing submission" id="{item_id}">'
        f'<td align="right" valign="top" class="title"><span class="rank">1.</span></td>'
        f'<td class="title"><span class="titleline"><a href="https://example.com/{item_id}">{title}</a>'
        f'<span class="sitebit comhead"> (<a href="from?site=example.com">example.com</a>)</span></span></td></tr>'
        f'<tr><td colspan="2"></td><td class="subtext"><span class="subline">{score}{age}'
        f' | <a href="item?id={item_id}">discuss</a></span></td></tr>'
        f'<tr class="spacer" style="height:5px"></tr>'
    )


def hn_page(rows: List[str], more_href: Optional[str] = "newest?next=100&amp;n=31") -> str:
    more = (
        f'<tr class="morespace" style="height:10px"></tr>'
        f'<tr><td colspan="2"></td><td class="title"><a href="{more_href}" class="morelink" rel="next">More</a></td></tr>'
    ) if more_href else ""
    return (
        '<html lang="en"><head><title>New Links | Hacker News</title></head><body><center>'
        '<table id="hnmain"><tr><td><table border="0" cellpadding="0" cellspacing="0">'
        + "".join(rows) + more +
        '</table></td></tr></table></center></body></html>'
    )


@pytest.fixture
def fake_source():
    return FakeSource
