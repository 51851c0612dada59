from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.routing import APIRoute
from starlette.datastructures import URL

from ..domain.links import SELF_REL, Link

__all__ = ["LinkBuilder"]


class LinkBuilder:
    """Builds links to controllers and routes, resolved against the inbound request.

    Instances are immutable: `slash()` returns a new builder.
    """

    __slots__ = ("_url",)

    def __init__(self, url: URL | str) -> None:
        self._url = url if isinstance(url, URL) else URL(str(url))

    @classmethod
    def link_to(cls, request: Request, controller: APIRouter) -> LinkBuilder:
        """Point at the base URI a controller (router) is mounted under.

        The mount point is read from the application's routes, so a prefix
        given to `include_router(..., prefix=...)` is honoured. Without an
        application router in scope only `controller.prefix` is used.
        """
        base = str(request.base_url).rstrip("/")
        return cls(base + (_mounted_prefix(request, controller) or "/"))

    @classmethod
    def link_to_route(cls, request: Request, name: str, **path_params: object) -> LinkBuilder:
        """Point at a named route; unknown names raise starlette's NoMatchFound."""
        return cls(str(request.url_for(name, **path_params)))

    def slash(self, segment: object) -> LinkBuilder:
        text = str(segment).strip("/")
        if not text:
            return self
        path = f"{self._url.path.rstrip('/')}/{quote(text)}"
        return LinkBuilder(self._url.replace(path=path))

    def to_url(self) -> URL:
        """Return the URI components; use `URL.replace()` to derive variants."""
        return self._url

    def with_rel(self, rel: str) -> Link:
        return Link(href=str(self._url), rel=rel)

    def with_self_rel(self) -> Link:
        return self.with_rel(SELF_REL)

    def __str__(self) -> str:
        return str(self._url)

    def __repr__(self) -> str:
        return f"LinkBuilder({str(self._url)!r})"


def _mounted_prefix(request: Request, controller: APIRouter) -> str:
    """Path prefix of `controller` as mounted in the running application."""
    app_router = request.scope.get("router")
    if app_router is None:
        return controller.prefix
    mounted = {
        getattr(route, "endpoint", None): route.path
        for route in app_router.routes
        if isinstance(route, APIRoute)
    }
    for route in controller.routes:
        if not isinstance(route, APIRoute):
            continue
        path = mounted.get(route.endpoint)
        if path is not None and path.endswith(route.path):
            outer = path[: len(path) - len(route.path)]
            return outer + controller.prefix
    return controller.prefix
