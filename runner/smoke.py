#!/usr/bin/env python3
"""Smoke runner that exercises the catalog purely through its links.

Steps:
- wait for server health
- fetch the API index and expand its templated `items` link
- follow `next` links until the last page
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from app.logging_conf import get_logger, setup_logging
from runner.cli import parse_args
from runner.client import fetch_index, find_link, wait_for_health, walk_pages
from runner.types import PageVisit

setup_logging()
logger = get_logger("runner")


def summarize(visits: list[PageVisit], seen: list[str], meta: dict) -> tuple[dict, int]:
    """Compute summary dict and an exit code from a finished walk."""
    expected = meta.get("total_elements", 0)
    duplicates = len(seen) - len(set(seen))
    numbers = [v.number for v in visits]
    in_order = numbers == list(range(len(visits)))
    summary = {
        "component": "runner",
        "event": "summary",
        "pages": len(visits),
        "items_seen": len(seen),
        "total_elements": expected,
        "duplicates": duplicates,
        "pages_in_order": in_order,
        "max_page_ms": max((v.elapsed_ms for v in visits), default=0.0),
    }
    ok = len(seen) == expected and duplicates == 0 and in_order
    return summary, 0 if ok else 1


async def run_walk(
    client: httpx.AsyncClient,
    *,
    query: str | None = None,
    tags: list[str] | None = None,
    size: int | None = None,
    max_pages: int = 1000,
    timeout_s: float = 20.0,
) -> int:
    await wait_for_health(client, timeout_s=timeout_s)
    items = find_link(await fetch_index(client), "items")
    start = items.expand(q=query, tag=tags or None, size=size)
    visits, seen, meta = await walk_pages(client, start, max_pages=max_pages)
    summary, exit_code = summarize(visits, seen, meta)
    logger.info("runner.summary", extra=summary)
    return exit_code


async def _main(args) -> int:
    async with httpx.AsyncClient(base_url=args.base_url, timeout=10.0) as client:
        return await run_walk(
            client,
            query=args.query,
            tags=args.tag,
            size=args.size,
            max_pages=args.max_pages,
            timeout_s=args.timeout,
        )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    raise SystemExit(asyncio.run(_main(args)))


if __name__ == "__main__":
    main()
