from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, HTTPException, Query, Request, status

from ..domain.links import Link
from ..logging_conf import get_logger
from ..service import catalog_service
from .link_builder import LinkBuilder
from .link_utils import (
    create_link,
    create_templated_link,
    get_uri_params,
    get_uri_params_excluding,
    get_uri_params_including_only,
)
from .models import ApiIndex, ItemPage, ItemResource, PageMetadata

index_router = APIRouter(tags=["index"])
items_router = APIRouter(prefix="/items", tags=["items"])
logger = get_logger("api")

# Parameters a client may carry from an item back to the collection it came from.
_COLLECTION_PARAMS = ("q", "tag", "sort", "size")


@index_router.get("/", response_model=ApiIndex, summary="API entry point")
async def index(request: Request) -> ApiIndex:
    """List the top-level links of the API."""
    return ApiIndex(
        links=[
            LinkBuilder.link_to(request, index_router).with_self_rel(),
            create_templated_link(
                items_router, "items", "q", "tag", "page", "size", "sort", request=request
            ),
            LinkBuilder.link_to_route(request, "health").with_rel("health"),
        ]
    )


@items_router.get("", response_model=ItemPage, summary="Page through catalog items")
async def list_items(
    request: Request,
    q: str | None = Query(None, description="Case-insensitive name filter"),
    tag: list[str] = Query([], description="Repeat ?tag=..; every tag must match"),
    sort: Literal["asc", "desc"] = "asc",
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int | None = Query(None, description="Page size; defaults to PAGE_SIZE"),
) -> ItemPage:
    """Return one page of items with navigation links."""
    try:
        out = catalog_service.list_items(q=q, tags=tag, sort=sort, page=page, size=size)
    except catalog_service.InvalidPageSizeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error_code": e.code, "error_message": str(e)},
        )
    builder = LinkBuilder.link_to(request, items_router)
    meta = PageMetadata(**out["page"])
    return ItemPage(
        items=[_item_resource(builder, it) for it in out["items"]],
        page=meta,
        links=_page_links(request, builder, meta),
    )


@items_router.get("/{item_id}", response_model=ItemResource, summary="Fetch one item")
async def get_item(request: Request, item_id: str) -> ItemResource:
    """Return a single item linked back to its (filtered) collection."""
    try:
        item = catalog_service.get_item(item_id=item_id)
    except catalog_service.ItemNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error_code": e.code, "error_message": str(e)},
        )
    builder = LinkBuilder.link_to(request, items_router)
    resource = _item_resource(builder, item)
    collection = create_link(
        builder, get_uri_params_including_only(request, *_COLLECTION_PARAMS)
    ).with_rel("collection")
    return resource.model_copy(update={"links": [*resource.links, collection]})


def _item_resource(builder: LinkBuilder, item: dict) -> ItemResource:
    return ItemResource(**item, links=[builder.slash(item["id"]).with_self_rel()])


def _page_links(request: Request, builder: LinkBuilder, meta: PageMetadata) -> list[Link]:
    links = [create_link(builder, get_uri_params(request))]
    others = get_uri_params_excluding(request, "page")

    def to_page(number: int, rel: str) -> Link:
        return create_link(builder, {**others, "page": [str(number)]}).with_rel(rel)

    if meta.total_pages:
        links.append(to_page(0, "first"))
    if 0 < meta.number <= meta.total_pages:
        links.append(to_page(meta.number - 1, "prev"))
    if meta.number + 1 < meta.total_pages:
        links.append(to_page(meta.number + 1, "next"))
    if meta.total_pages:
        links.append(to_page(meta.total_pages - 1, "last"))
    links.append(create_templated_link(builder, "search", "q", "tag", "size", "sort"))
    return links
