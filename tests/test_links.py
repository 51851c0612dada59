"""Tests for the hypermedia value types."""

from __future__ import annotations

from app.domain.links import (
    Link,
    TemplateVariable,
    TemplateVariables,
    UriTemplate,
    VariableType,
)


def test_template_renders_form_style_query():
    template = UriTemplate(
        "http://x/items",
        TemplateVariables([TemplateVariable("q"), TemplateVariable("page")]),
    )

    assert str(template) == "http://x/items{?q,page}"


def test_template_without_variables_renders_base():
    assert str(UriTemplate("http://x/items")) == "http://x/items"


def test_continued_variable_type_selects_ampersand():
    variables = TemplateVariables([TemplateVariable("q", VariableType.request_param_continued)])

    assert variables.render() == "{&q}"


def test_parse_splits_base_and_variables():
    template = UriTemplate.parse("http://x/items?size=5{&q,tag}")

    assert template.base_uri == "http://x/items?size=5"
    assert template.variable_names == ["q", "tag"]
    assert template.variables[0].type is VariableType.request_param_continued


def test_parse_plain_uri_has_no_variables():
    template = UriTemplate.parse("http://x/items?page=1")

    assert template.base_uri == "http://x/items?page=1"
    assert len(template.variables) == 0


def test_expand_encodes_values_and_drops_missing():
    template = UriTemplate.parse("http://x/items{?q,tag,page}")

    assert template.expand(q="a b", tag=["red", "small"]) == "http://x/items?q=a%20b&tag=red&tag=small"
    assert template.expand({"page": 2}) == "http://x/items?page=2"
    assert template.expand() == "http://x/items"


def test_expand_appends_to_existing_query():
    assert UriTemplate.parse("http://x/items?size=5{&q}").expand(q="z") == "http://x/items?size=5&q=z"


def test_concat_skips_known_names():
    variables = TemplateVariables([TemplateVariable("q")])

    merged = variables.concat(TemplateVariable("q"), TemplateVariable("page"))

    assert merged.names == ["q", "page"]
    assert variables.names == ["q"]


def test_link_from_template_sets_templated_flag():
    template = UriTemplate("http://x/items", TemplateVariables([TemplateVariable("q")]))

    link = Link.from_template(template, "search")

    assert link == Link(href="http://x/items{?q}", rel="search", templated=True)


def test_link_expand_returns_concrete_link():
    link = Link(href="http://x/items{?q,size}", rel="items", templated=True)

    expanded = link.expand(size=5)

    assert expanded.href == "http://x/items?size=5"
    assert expanded.rel == "items"
    assert expanded.templated is False
    assert expanded.variable_names == []


def test_concrete_link_expand_is_identity():
    link = Link(href="http://x/items?q=a")

    assert link.expand(q="b") is link


def test_with_rel_copies():
    link = Link(href="http://x/items")

    assert link.with_rel("next").rel == "next"
    assert link.rel == "self"
    assert link.with_rel("next").with_self_rel().rel == "self"


def test_link_serializes_for_responses():
    assert Link(href="http://x/").model_dump() == {
        "href": "http://x/",
        "rel": "self",
        "templated": False,
    }
