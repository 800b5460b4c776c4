from pydantic import BaseModel, Field

from newest_validator.models import DEFAULT_TARGET, DEFAULT_URL

# Constants
DEFAULT_MAX_PAGES = 20
DEFAULT_STALL_ROUNDS = 3
DEFAULT_NAVIGATION_TIMEOUT_MS = 30000


class RunConfig(BaseModel):
    url: str = DEFAULT_URL
    target: int = Field(default=DEFAULT_TARGET, ge=1)
    max_pages: int = Field(default=DEFAULT_MAX_PAGES, ge=0)
    stall_rounds: int = Field(default=DEFAULT_STALL_ROUNDS, ge=1)
    static: bool = False  # plain HTTP fetches instead of a browser
    headless: bool = True
    navigation_timeout_ms: int = Field(default=DEFAULT_NAVIGATION_TIMEOUT_MS, gt=0)
