import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional

from newest_validator.accumulator import accumulate
from newest_validator.config import RunConfig
from newest_validator.errors import NavigationError, SourceExhausted
from newest_validator.logs import success
from newest_validator.models import Error, RunReport, ValidationOk, ValidationResult
from newest_validator.sources import ListingSource, build_source
from newest_validator.validator import validate

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@asynccontextmanager
async def _opened(source: ListingSource) -> AsyncIterator[ListingSource]:
    """Like `async with source`, but a failing close only logs a warning."""
    await source.__aenter__()
    try:
        yield source
    finally:
        try:
            await source.close()
        except Exception as e:
            logger.warning("Closing the source failed: %s: %s", type(e).__name__, e)


async def run_validation(config: RunConfig, source: Optional[ListingSource] = None) -> RunReport:
    """Open the source, collect `config.target` items and check their order.

    Fatal problems end up in `RunReport.errors`, never raised; the source is
    closed on every path.
    """
    started_at = _now()
    errors: List[Error] = []
    result: Optional[ValidationResult] = None
    collected = 0
    pages_loaded = 0

    if source is None:
        source = build_source(config)

    logger.info("Bot started: validating newest items at %s", config.url)
    try:
        async with _opened(source):
            await source.navigate(config.url)
            accumulation = await accumulate(
                source,
                config.target,
                max_pages=config.max_pages,
                stall_rounds=config.stall_rounds,
            )
            collected = len(accumulation.items)
            pages_loaded = accumulation.pages_loaded

            logger.info("Sorting articles from newest to oldest...")
            result = validate(accumulation.items, config.target)
    except NavigationError as e:
        logger.error("Validation failed: %s", e)
        errors.append(Error(message=str(e), phase="navigation"))
    except SourceExhausted as e:
        logger.error("Validation failed: %s", e)
        errors.append(Error(message=f"{type(e).__name__}: {e}", phase="accumulate"))
    except Exception as e:
        logger.exception("Validation failed with an unexpected error")
        errors.append(Error(message=f"{type(e).__name__}: {e}", phase="core_engine"))

    if isinstance(result, ValidationOk):
        success(logger, "Successfully validated and sorted %d articles.", len(result.ordered))
    elif result is not None:
        logger.error("Validation failed: %s", result.message)

    success(logger, "Bot execution completed.")
    return RunReport(
        url=config.url,
        target=config.target,
        collected=collected,
        pages_loaded=pages_loaded,
        started_at=started_at,
        finished_at=_now(),
        result=result,
        errors=errors,
    )
