from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

import httpx

from app.domain.links import Link
from app.logging_conf import get_logger
from runner.types import LinkNotFoundError, PageFetchError, PageVisit, WalkError

logger = get_logger("runner.client")


async def wait_for_health(client: httpx.AsyncClient, timeout_s: float = 20.0) -> None:
    """Ping /health until it returns ok or raise after a timeout."""
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        try:
            r = await client.get("/health")
            if r.status_code == 200 and r.json().get("ok") is True:
                logger.info("health.ok", extra={"event": "health_ok"})
                return
        except httpx.HTTPError:
            pass
        await asyncio.sleep(0.25)
    raise WalkError("Health check did not pass within timeout")


def find_link(links: Iterable[Link], rel: str) -> Link:
    """Return the first link with relation `rel`."""
    for link in links:
        if link.rel == rel:
            return link
    raise LinkNotFoundError(f"no link with rel={rel!r}")


def parse_links(data: dict) -> list[Link]:
    return [Link.model_validate(raw) for raw in data.get("links", [])]


async def fetch_index(client: httpx.AsyncClient) -> list[Link]:
    """Fetch the API entry point and return its links."""
    r = await client.get("/")
    r.raise_for_status()
    links = parse_links(r.json())
    logger.info("index.fetched", extra={"event": "index_fetched", "rels": [link.rel for link in links]})
    return links


async def fetch_page(client: httpx.AsyncClient, href: str, *, retries: int = 2) -> dict:
    """GET one page of items, with retry.

    - Retries transient transport errors and 5xx responses
    - 4xx responses fail immediately
    """
    last_err: Exception | None = None
    for attempt in range(retries):
        try:
            r = await client.get(href)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code < 500:
                raise PageFetchError(f"{href} returned {e.response.status_code}") from e
            last_err = e
        except httpx.TransportError as e:  # pragma: no cover - network flakiness
            last_err = e
        logger.warning(
            "page.retry",
            extra={
                "event": "page_retry",
                "href": href,
                "attempt": attempt + 1,
                "error": str(last_err),
            },
        )
    raise PageFetchError(f"fetching {href} failed: {last_err}")


async def walk_pages(
    client: httpx.AsyncClient, start: Link, *, max_pages: int = 1000
) -> tuple[list[PageVisit], list[str], dict]:
    """Follow `next` links from `start` until none remain.

    Returns the visits, the ids of every item seen, and the page metadata of
    the last page fetched.
    """
    visits: list[PageVisit] = []
    seen: list[str] = []
    meta: dict = {}
    href: str | None = start.href
    while href is not None:
        if len(visits) >= max_pages:
            raise WalkError(f"gave up after {max_pages} pages")
        began = time.perf_counter()
        data = await fetch_page(client, href)
        elapsed_ms = (time.perf_counter() - began) * 1000.0
        meta = data["page"]
        seen.extend(it["id"] for it in data["items"])
        visits.append(
            PageVisit(
                href=href,
                number=meta["number"],
                item_count=len(data["items"]),
                elapsed_ms=round(elapsed_ms, 2),
            )
        )
        try:
            href = find_link(parse_links(data), "next").href
        except LinkNotFoundError:
            href = None
    logger.info(
        "walk.done",
        extra={"event": "walk_done", "pages": len(visits), "items": len(seen)},
    )
    return visits, seen, meta
