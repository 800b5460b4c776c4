from typing import List

from newest_validator.models import Item, RunReport, ValidationOk

RULE = "-" * 40
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(item: Item) -> str:
    # Local time
    return item.published_at.astimezone().strftime(TIME_FORMAT)


def render_listing(ordered: List[Item]) -> List[str]:
    return [f"{index}. [{format_timestamp(item)}] {item.title}" for index, item in enumerate(ordered, start=1)]


def render_report(report: RunReport) -> str:
    lines = []
    for error in report.errors:
        lines.append(f"Validation failed ({error.phase}): {error.message}")

    result = report.result
    if isinstance(result, ValidationOk):
        lines.append(f"Final sorted list of {len(result.ordered)} articles (newest to oldest):")
        lines.append(RULE)
        lines.extend(render_listing(result.ordered))
        lines.append(RULE)
        lines.append(f"Successfully validated and sorted {len(result.ordered)} articles.")
    elif result is not None:
        lines.append(f"Validation failed: {result.message}")

    return "\n".join(lines)


def exit_code(report: RunReport) -> int:
    if report.errors or report.result is None:
        return 2
    if isinstance(report.result, ValidationOk):
        return 0
    return 1
