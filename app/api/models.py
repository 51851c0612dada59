from __future__ import annotations

from pydantic import BaseModel

from ..domain.links import Link


class ItemResource(BaseModel):
    """A catalog item with its hypermedia links."""
    id: str
    name: str
    tags: list[str]
    links: list[Link] = []


class PageMetadata(BaseModel):
    """Position of a page within the full result set."""
    number: int
    size: int
    total_elements: int
    total_pages: int


class ItemPage(BaseModel):
    """One page of items plus navigation links."""
    items: list[ItemResource]
    page: PageMetadata
    links: list[Link]


class ApiIndex(BaseModel):
    """Entry point listing the top-level links of the API."""
    links: list[Link]
