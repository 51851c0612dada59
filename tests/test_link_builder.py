"""Tests for LinkBuilder resolution against requests and routers."""

from __future__ import annotations

import pytest
from fastapi import APIRouter
from starlette.datastructures import URL
from starlette.routing import NoMatchFound

from app.api.link_builder import LinkBuilder
from tests.conftest import make_request


def test_link_to_uses_router_prefix():
    builder = LinkBuilder.link_to(make_request(), APIRouter(prefix="/items"))

    assert str(builder) == "http://testserver/items"


def test_link_to_router_without_prefix_points_at_root():
    builder = LinkBuilder.link_to(make_request(), APIRouter())

    assert builder.with_self_rel().href == "http://testserver/"


def test_slash_appends_encoded_segment():
    builder = LinkBuilder("http://testserver/items/")

    assert str(builder.slash("item 1")) == "http://testserver/items/item%201"
    assert str(builder.slash("")) == "http://testserver/items/"
    assert str(builder) == "http://testserver/items/"


def test_to_url_exposes_components():
    url = LinkBuilder("http://testserver/items?q=a").to_url()

    assert isinstance(url, URL)
    assert url.path == "/items"
    assert url.query == "q=a"


def test_with_rel_builds_concrete_link():
    link = LinkBuilder("http://testserver/items").with_rel("collection")

    assert link.href == "http://testserver/items"
    assert link.rel == "collection"
    assert link.templated is False


def test_link_to_route_resolves_named_route(client):
    response = client.get("/")
    health = next(link for link in response.json()["links"] if link["rel"] == "health")

    assert health["href"] == "http://testserver/health"


def test_link_to_route_unknown_name_propagates(app):
    request = make_request()
    request.scope["app"] = app
    request.scope["router"] = app.router

    with pytest.raises(NoMatchFound):
        LinkBuilder.link_to_route(request, "no_such_route")


def test_link_to_without_app_router_falls_back_to_prefix():
    request = make_request()

    assert "router" not in request.scope
    assert str(LinkBuilder.link_to(request, APIRouter(prefix="/items"))) == "http://testserver/items"
