import math
from itertools import islice
from typing import Callable, Iterable, List, Optional, Sequence

from newest_validator.models import DEFAULT_TARGET, Item, ValidationOk, ValidationResult, Violation


def _timestamp(item: Item) -> int:
    return item.timestamp_ms


def is_valid_timestamp(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def check_order(ordered: Sequence[Item]) -> Optional[Violation]:
    """Return the first pair where a later item is newer than the one before it."""
    for i in range(1, len(ordered)):
        current, previous = ordered[i], ordered[i - 1]
        if current.timestamp_ms > previous.timestamp_ms:
            return Violation(
                kind="order_violation",
                position=i,
                current=current,
                previous=previous,
                message=(
                    f"Sorting error at position {i}: "
                    f"Article '{current.title}' is newer than '{previous.title}'"
                ),
            )
    return None


def validate(
    collection: Iterable[Item],
    n: int = DEFAULT_TARGET,
    key: Callable[[Item], int] = _timestamp,
) -> ValidationResult:
    """Sort the first `n` items newest first and confirm the order holds.

    Only the first `n` items of `collection` are ever read. Raises ValueError
    if there are fewer than `n`.
    """
    sample: List[Item] = list(islice(collection, n))
    if len(sample) < n:
        raise ValueError(f"Need {n} items to validate, got {len(sample)}")

    for i, item in enumerate(sample):
        if not is_valid_timestamp(item.timestamp_ms):
            return Violation(
                kind="invalid_timestamp",
                position=i,
                current=item,
                previous=sample[i - 1] if i else None,
                message=f"Invalid timestamp at position {i}: Article '{item.title}' has timestamp {item.timestamp_ms!r}",
            )

    ordered = sorted(sample, key=key, reverse=True)
    violation = check_order(ordered)
    if violation is not None:
        return violation
    return ValidationOk(ordered=ordered)
