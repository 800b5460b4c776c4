import logging
from typing import List

from newest_validator.config import DEFAULT_MAX_PAGES, DEFAULT_STALL_ROUNDS
from newest_validator.errors import NoMoreItems, PaginationLimitReached, SourceExhausted
from newest_validator.extraction import admit_all
from newest_validator.models import AccumulationResult, Item
from newest_validator.sources import ListingSource

logger = logging.getLogger(__name__)


async def accumulate(
    source: ListingSource,
    target: int,
    max_pages: int = DEFAULT_MAX_PAGES,
    stall_rounds: int = DEFAULT_STALL_ROUNDS,
) -> AccumulationResult:
    """Extract page after page from `source` until at least `target` items are held.

    Every extraction is appended as-is, so items seen twice are kept twice.
    `load_more()` is only awaited while the count is still short.
    """
    if target <= 0:
        raise ValueError(f"target must be positive, got {target}")

    items: List[Item] = []
    pages_loaded = 0
    empty_rounds = 0

    while True:
        logger.info("Extracting articles... Current count: %d", len(items))
        raw_items = await source.extract_visible_items()
        admitted = admit_all(raw_items)
        logger.info(
            "Extracted %d new articles from page (%d incomplete rows dropped).",
            len(admitted), len(raw_items) - len(admitted),
        )
        items.extend(admitted)

        if len(items) >= target:
            break

        empty_rounds = 0 if admitted else empty_rounds + 1
        if empty_rounds >= stall_rounds:
            raise SourceExhausted(
                f"No usable items in {empty_rounds} consecutive extractions; "
                f"stuck at {len(items)} of {target}"
            )
        if pages_loaded >= max_pages:
            raise PaginationLimitReached(
                f"Loaded {pages_loaded} pages but only collected {len(items)} of {target} items"
            )

        logger.info("Clicking 'More' to load additional articles...")
        try:
            await source.load_more()
        except NoMoreItems as e:
            raise SourceExhausted(
                f"Source ran out after {len(items)} of {target} items: {e}"
            ) from e
        pages_loaded += 1

    return AccumulationResult(items=items, pages_loaded=pages_loaded)
