"""
Base model shared by all Timesheet entities.

The Timesheet API speaks camelCase JSON; models expose snake_case
attributes and accept/emit camelCase through an alias generator. Unknown
upstream fields are preserved so nothing is dropped on the way to a widget.
"""

from __future__ import annotations

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class TimesheetModel(BaseModel):
    """Base model with camelCase aliases and passthrough of unknown fields."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict using API field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PageParams(TimesheetModel):
    """Pagination metadata returned alongside list results."""

    count: Optional[int] = None
    page: Optional[int] = None
    limit: Optional[int] = None


class Page(TimesheetModel, Generic[T]):
    """One page of a paginated list response."""

    items: List[T] = Field(default_factory=list)
    params: Optional[PageParams] = None

    @field_validator("items", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return v if v is not None else []

    @property
    def total_count(self) -> int:
        """Total number of matching records, falling back to the page size."""
        if self.params is not None and self.params.count:
            return self.params.count
        return len(self.items)
