"""Pagination loop: progress, stopping and exhaustion."""

import pytest

from conftest import descending_batches, raw
from newest_validator.accumulator import accumulate
from newest_validator.errors import PaginationLimitReached, SourceExhausted


@pytest.mark.asyncio
async def test_stops_once_target_is_reached(fake_source):
    source = fake_source(descending_batches(6, per_page=2))

    result = await accumulate(source, target=5)

    assert len(result.items) == 6
    assert source.load_more_calls == 2
    assert result.pages_loaded == 2


@pytest.mark.asyncio
async def test_never_loads_more_after_target(fake_source):
    source = fake_source(descending_batches(120, per_page=30))

    result = await accumulate(source, target=100)

    assert len(result.items) == 120
    assert source.events == ["extract", "load_more"] * 3 + ["extract"]


@pytest.mark.asyncio
async def test_single_page_is_enough(fake_source):
    source = fake_source(descending_batches(30, per_page=30))

    result = await accumulate(source, target=30)

    assert source.load_more_calls == 0
    assert len(result.items) == 30


@pytest.mark.asyncio
async def test_running_out_of_pages_is_fatal(fake_source):
    source = fake_source(descending_batches(80, per_page=30))

    with pytest.raises(SourceExhausted, match="80 of 100"):
        await accumulate(source, target=100)
    assert source.load_more_calls == 2


@pytest.mark.asyncio
async def test_incomplete_rows_do_not_count(fake_source):
    batches = [
        [raw("1", 3000), raw("2", float("nan")), raw("3", 2000, title="")],
        [raw("4", 1000)],
    ]
    source = fake_source(batches)

    result = await accumulate(source, target=2)

    assert [i.id for i in result.items] == ["1", "4"]


@pytest.mark.asyncio
async def test_reextracted_items_are_kept(fake_source):
    first = [raw("1", 3000), raw("2", 2000)]
    source = fake_source([first, first + [raw("3", 1000)]])

    result = await accumulate(source, target=4)

    assert [i.id for i in result.items] == ["1", "2", "1", "2", "3"]


@pytest.mark.asyncio
async def test_page_budget(fake_source):
    source = fake_source(descending_batches(100, per_page=10))

    with pytest.raises(PaginationLimitReached):
        await accumulate(source, target=100, max_pages=3)
    assert source.load_more_calls == 3


@pytest.mark.asyncio
async def test_stalled_source(fake_source):
    empty = [raw("x", None)]
    source = fake_source([[raw("1", 1000)], empty, empty, empty, empty])

    with pytest.raises(SourceExhausted, match="consecutive"):
        await accumulate(source, target=10, stall_rounds=3)
    assert source.extract_calls == 4


@pytest.mark.asyncio
async def test_target_must_be_positive(fake_source):
    with pytest.raises(ValueError):
        await accumulate(fake_source([[]]), target=0)
