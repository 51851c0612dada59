"""Query-parameter and hypermedia-link helpers for controllers.

Parameter maps are plain insertion-ordered dicts of name -> list of values.
Every function returns freshly built maps, so callers may mutate the result
without touching request state.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import quote, urlencode

from fastapi import APIRouter, Request
from starlette.datastructures import URL

from ..domain.links import Link, TemplateVariable, TemplateVariables, UriTemplate, VariableType
from ..logging_conf import get_logger
from .link_builder import LinkBuilder

__all__ = [
    "ParamMap",
    "create_link",
    "get_uri_params",
    "get_uri_params_including_only",
    "get_uri_params_excluding",
    "create_templated_link",
    "create_template_vars",
]

ParamMap = dict[str, list[str]]

logger = get_logger("api.links")


def create_link(link_builder: LinkBuilder, uri_params: Mapping[str, Sequence[str]]) -> Link:
    """Link to the builder's URI with its query string replaced by `uri_params`.

    The existing query string is dropped, not merged. Multi-valued entries
    become repeated `name=value` pairs in map order.
    """
    url = URL(link_builder.with_self_rel().href)
    pairs = [(name, value) for name, values in uri_params.items() for value in values]
    href = str(url.replace(query=urlencode(pairs, quote_via=quote)))
    logger.debug("link.create", extra={"event": "link_create", "href": href})
    return Link(href=href)


# ------------------------
# Query parameters
# ------------------------

def get_uri_params(request: Request) -> ParamMap:
    """Return every query parameter of `request`, keeping order and repeats."""
    params: ParamMap = {}
    for name, value in request.query_params.multi_items():
        params.setdefault(name, []).append(value)
    return params


def get_uri_params_including_only(request: Request, *names: str) -> ParamMap:
    """Return only the parameters named in `names`; unknown names are skipped."""
    wanted = set(names)
    return {name: values for name, values in get_uri_params(request).items() if name in wanted}


def get_uri_params_excluding(request: Request, *names: str) -> ParamMap:
    """Return all parameters except those named in `names`."""
    params = get_uri_params(request)
    for name in names:
        params.pop(name, None)
    return params


# ------------------------
# Templated links
# ------------------------

def create_templated_link(
    target: APIRouter | LinkBuilder,
    rel: str,
    *param_names: str,
    request: Request | None = None,
) -> Link:
    """Link to a controller or builder URI with query-parameter placeholders.

    A router is resolved against `request` to its mounted base URI. With no
    `param_names` the link is a plain, non-templated one.
    """
    if isinstance(target, LinkBuilder):
        builder = target
    else:
        builder = LinkBuilder.link_to(request, target)  # type: ignore[arg-type]
    template = UriTemplate(str(builder.to_url()), create_template_vars(*param_names))
    link = Link.from_template(template, rel)
    logger.debug(
        "link.templated",
        extra={"event": "link_templated", "href": link.href, "rel": rel},
    )
    return link


def create_template_vars(*param_names: str) -> TemplateVariables:
    return TemplateVariables(
        TemplateVariable(name, VariableType.request_param) for name in param_names
    )
