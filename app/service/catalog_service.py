from __future__ import annotations

import math
import os
from itertools import cycle

from ..logging_conf import get_logger

logger = get_logger("service.catalog")

_NAMES = (
    "anchor", "beacon", "bracket", "cable", "canvas", "compass", "crate",
    "dial", "easel", "funnel", "gasket", "hinge", "kettle", "lantern",
    "ledger", "mallet", "nozzle", "pulley", "ratchet", "sextant", "spindle",
    "trowel", "valve",
)
_COLORS = ("red", "green", "blue")
_SIZES = ("small", "large")


class CatalogError(Exception):
    """Base class for catalog errors; `code` is the stable API error code."""

    code: str = "catalog_error"


class ItemNotFoundError(CatalogError, LookupError):
    code = "item_not_found"


class InvalidPageSizeError(CatalogError, ValueError):
    code = "invalid_page_size"


def _build_items() -> tuple[dict, ...]:
    colors = cycle(_COLORS)
    sizes = cycle(_SIZES)
    return tuple(
        {
            "id": f"item-{n:03d}",
            "name": name.capitalize(),
            "tags": [next(colors), next(sizes)],
        }
        for n, name in enumerate(_NAMES, start=1)
    )


_ITEMS = _build_items()


def get_page_size_from_env() -> int:
    """Return PAGE_SIZE from environment, defaulting to 10."""
    return _positive_int_from_env("PAGE_SIZE", "10")


def get_max_page_size_from_env() -> int:
    """Return MAX_PAGE_SIZE from environment, defaulting to 50."""
    return _positive_int_from_env("MAX_PAGE_SIZE", "50")


def _positive_int_from_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        val = int(raw, 10)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer") from e
    if val < 1:
        raise ValueError(f"{name} must be >= 1")
    return val


def resolve_page_size(size: int | None) -> int:
    """Return the effective page size, rejecting values outside [1, MAX_PAGE_SIZE]."""
    if size is None:
        return min(get_page_size_from_env(), get_max_page_size_from_env())
    max_size = get_max_page_size_from_env()
    if not (1 <= size <= max_size):
        raise InvalidPageSizeError(f"size must be between 1 and {max_size}")
    return size


# ------------------------
# Use-cases
# ------------------------

def list_items(
    *,
    q: str | None = None,
    tags: list[str] | None = None,
    sort: str = "asc",
    page: int = 0,
    size: int | None = None,
) -> dict:
    """Return one zero-based page of items matching the filters."""
    size = resolve_page_size(size)
    matches = [it for it in _ITEMS if _matches(it, q=q, tags=tags or [])]
    matches.sort(key=lambda it: it["name"], reverse=(sort == "desc"))

    total = len(matches)
    # Slicing clamps pages past the end to an empty list, however large `page` is.
    start = page * size
    items = [dict(it, tags=list(it["tags"])) for it in matches[start : start + size]]
    logger.info(
        "items.list",
        extra={"event": "items_list", "page": page, "size": size, "total": total},
    )
    return {
        "items": items,
        "page": {
            "number": page,
            "size": size,
            "total_elements": total,
            "total_pages": math.ceil(total / size),
        },
    }


def get_item(*, item_id: str) -> dict:
    """Return a single item or raise ItemNotFoundError."""
    for it in _ITEMS:
        if it["id"] == item_id:
            return dict(it, tags=list(it["tags"]))
    logger.info("items.missing", extra={"event": "items_missing", "item_id": item_id})
    raise ItemNotFoundError(f"No item with id {item_id!r}")


def _matches(item: dict, *, q: str | None, tags: list[str]) -> bool:
    if q and q.lower() not in item["name"].lower():
        return False
    return all(tag in item["tags"] for tag in tags)
