"""Exceptions raised across the source, accumulator and runner boundaries."""


class NewestValidatorError(Exception):
    """Base exception for newest-validator."""


class NavigationError(NewestValidatorError):
    """Raised when the listing page cannot be loaded."""


class NoMoreItems(NewestValidatorError):
    """Raised by a source when there is no further page to reveal."""


class SourceExhausted(NewestValidatorError):
    """Raised when pagination ends before the target count is reached."""


class PaginationLimitReached(SourceExhausted):
    """Raised when the page budget runs out before the target count is reached."""
