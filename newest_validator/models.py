from pydantic import AnyUrl, BaseModel, ConfigDict, Field
from typing import Any, List, Literal, Optional, Union
from datetime import datetime, timezone

DEFAULT_URL = "https://news.ycombinator.com/newest"
DEFAULT_TARGET = 100


class RawItem(BaseModel):
    """One listing row as the source hands it over, before admission."""
    id: Optional[str] = None
    title: Optional[str] = None
    timestamp_ms: Optional[Any] = None


class Item(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    timestamp_ms: int

    @property
    def published_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)


class AccumulationResult(BaseModel):
    items: List[Item] = Field(default_factory=list)
    pages_loaded: int = 0


class ValidationOk(BaseModel):
    kind: Literal["ok"] = "ok"
    ordered: List[Item]


class Violation(BaseModel):
    kind: Literal["order_violation", "invalid_timestamp"]
    position: int
    current: Item
    previous: Optional[Item] = None
    message: str


ValidationResult = Union[ValidationOk, Violation]


class Error(BaseModel):
    message: str
    phase: str


class RunReport(BaseModel):
    url: str
    target: int
    collected: int = 0
    pages_loaded: int = 0
    started_at: str
    finished_at: str
    result: Optional[ValidationResult] = None
    errors: List[Error] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return isinstance(self.result, ValidationOk) and not self.errors


class ValidateRequest(BaseModel):
    url: AnyUrl = Field(default=DEFAULT_URL, validate_default=True)
    target: int = Field(default=DEFAULT_TARGET, ge=1, le=500)
    static: bool = False


class ValidateResponse(BaseModel):
    report: RunReport
