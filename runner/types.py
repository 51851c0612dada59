from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PageVisit:
    """One page fetched while walking the `next` links."""

    href: str
    number: int
    item_count: int
    elapsed_ms: float


class WalkError(RuntimeError):
    """Raised when the link walk cannot proceed (e.g., health never ready)."""


class LinkNotFoundError(WalkError):
    """Raised when a response lacks a link relation the walk depends on."""


class PageFetchError(WalkError):
    """Raised when fetching a page fails after retries."""
