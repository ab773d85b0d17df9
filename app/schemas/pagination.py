"""Pydantic schema for paginated collection responses."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """One page of a searched and sorted collection."""

    page_number: int = Field(..., description="Requested page, starting at 1.")
    page_size: int = Field(
        ...,
        description="Requested page size. 0 yields an empty page.",
    )
    count: int = Field(..., description="Number of items on this page.")
    total_pages: int | None = Field(
        ...,
        description="Number of pages for the filtered collection; null when page_size is 0.",
    )
    has_previous_page: bool = Field(..., description="True when page_number > 1.")
    has_next_page: bool = Field(..., description="True when a later page exists.")
    data: list[T] = Field(default_factory=list, description="Items on this page.")
