"""Navigation state models for one ``authenticate()`` invocation.

Contains the parameter snapshot supplied by the host and the flow states
the classifier derives from it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union


def _freeze(params: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(params or {}))


@dataclass(frozen=True)
class CallbackParams:
    """Read-only snapshot of the current page parameters.

    ``query`` comes from the URL query string, ``route`` from path
    segments or the fragment, depending on the host router.
    """

    query: Mapping[str, Any] = field(default_factory=dict)
    route: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "query", _freeze(self.query))
        object.__setattr__(self, "route", _freeze(self.route))


@dataclass(frozen=True)
class Fresh:
    """No callback signal present: the flow has not started yet."""


@dataclass(frozen=True)
class CodeCallback:
    code: str


@dataclass(frozen=True)
class TokenCallback:
    """Implicit grant callback; ``fields`` is the raw token as received."""

    fields: Mapping[str, Any]


@dataclass(frozen=True)
class ErrorCallback:
    """Authorization server redirected back with an ``error``."""

    fields: Mapping[str, Any]


FlowState = Union[Fresh, CodeCallback, TokenCallback, ErrorCallback]
