from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict

__all__ = [
    "SELF_REL",
    "VariableType",
    "TemplateVariable",
    "TemplateVariables",
    "UriTemplate",
    "Link",
]

SELF_REL = "self"

# Trailing form-style query expression, e.g. "{?q,page}" or "{&q,page}".
_QUERY_EXPRESSION_RE = re.compile(r"\{([?&])([^{}]+)\}$")


class VariableType(str, Enum):
    """Kind of a template variable; the value is its RFC 6570 operator."""

    request_param = "?"
    request_param_continued = "&"


@dataclass(frozen=True)
class TemplateVariable:
    """A named placeholder in a URI template."""

    name: str
    type: VariableType = VariableType.request_param


class TemplateVariables:
    """Ordered, immutable sequence of template variables."""

    __slots__ = ("_variables",)

    def __init__(self, variables: Iterable[TemplateVariable] = ()) -> None:
        self._variables = tuple(variables)

    def __iter__(self) -> Iterator[TemplateVariable]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __getitem__(self, index: int) -> TemplateVariable:
        return self._variables[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemplateVariables):
            return NotImplemented
        return self._variables == other._variables

    def __hash__(self) -> int:
        return hash(self._variables)

    def __repr__(self) -> str:
        return f"TemplateVariables({list(self._variables)!r})"

    @property
    def names(self) -> list[str]:
        return [v.name for v in self._variables]

    def concat(self, *variables: TemplateVariable) -> TemplateVariables:
        """Return a new sequence with `variables` appended, skipping known names."""
        known = set(self.names)
        extra = []
        for variable in variables:
            if variable.name in known:
                continue
            known.add(variable.name)
            extra.append(variable)
        return TemplateVariables((*self._variables, *extra))

    def render(self, *, continued: bool = False) -> str:
        """Render as a single form-style query expression.

        `continued` selects the "&" operator, used when the base URI already
        carries a query string.
        """
        if not self._variables:
            return ""
        first = self._variables[0].type
        operator = "&" if continued or first is VariableType.request_param_continued else "?"
        return "{" + operator + ",".join(self.names) + "}"


class UriTemplate:
    """A base URI followed by query-parameter template variables."""

    __slots__ = ("base_uri", "variables")

    def __init__(self, base_uri: str, variables: TemplateVariables | None = None) -> None:
        self.base_uri = base_uri
        self.variables = variables if variables is not None else TemplateVariables()

    @classmethod
    def parse(cls, template: str) -> UriTemplate:
        """Split a rendered template back into base URI and variables."""
        match = _QUERY_EXPRESSION_RE.search(template)
        if match is None:
            return cls(template)
        operator, names = match.groups()
        kind = VariableType(operator)
        variables = TemplateVariables(
            TemplateVariable(name.strip(), kind) for name in names.split(",") if name.strip()
        )
        return cls(template[: match.start()], variables)

    @property
    def variable_names(self) -> list[str]:
        return self.variables.names

    def expand(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> str:
        """Fill in the variables and return a concrete URI.

        Variables without a value are dropped. List or tuple values become
        repeated `name=value` pairs.
        """
        provided = {**(values or {}), **kwargs}
        pairs: list[tuple[str, str]] = []
        for variable in self.variables:
            value = provided.get(variable.name)
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                pairs.extend((variable.name, str(v)) for v in value)
            else:
                pairs.append((variable.name, str(value)))
        if not pairs:
            return self.base_uri
        separator = "&" if "?" in self.base_uri else "?"
        return f"{self.base_uri}{separator}{urlencode(pairs, quote_via=quote)}"

    def __str__(self) -> str:
        return self.base_uri + self.variables.render(continued="?" in self.base_uri)

    def __repr__(self) -> str:
        return f"UriTemplate({str(self)!r})"


class Link(BaseModel):
    """Hypermedia reference embedded in API responses."""

    model_config = ConfigDict(frozen=True)

    href: str
    rel: str = SELF_REL
    templated: bool = False

    @classmethod
    def from_template(cls, template: UriTemplate, rel: str = SELF_REL) -> Link:
        return cls(href=str(template), rel=rel, templated=len(template.variables) > 0)

    def with_rel(self, rel: str) -> Link:
        return self.model_copy(update={"rel": rel})

    def with_self_rel(self) -> Link:
        return self.with_rel(SELF_REL)

    @property
    def variable_names(self) -> list[str]:
        if not self.templated:
            return []
        return UriTemplate.parse(self.href).variable_names

    def expand(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> Link:
        """Return a concrete link with the template variables filled in."""
        if not self.templated:
            return self
        return Link(href=UriTemplate.parse(self.href).expand(values, **kwargs), rel=self.rel)
