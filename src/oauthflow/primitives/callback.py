"""Parameter sources for the provider.

Turns the current page location into the ``CallbackParams`` snapshot the
classifier consumes.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol
from urllib.parse import parse_qs, urlparse

from oauthflow.models.flow import CallbackParams


class ParameterSource(Protocol):
    """Supplies the current page parameters, once per ``authenticate()``."""

    def current_params(self) -> CallbackParams: ...


def _single_values(raw: str) -> dict[str, str]:
    # Blank values still count: the classifier keys on presence
    parsed = parse_qs(raw, keep_blank_values=True)
    return {key: values[0] for key, values in parsed.items() if values}


def params_from_url(url: str) -> CallbackParams:
    """Parse a callback URL into query and fragment parameters.

    The fragment is parsed as a query string, which is where implicit grant
    servers put the token.

    Args:
        url: Full URL of the current page

    Returns:
        CallbackParams: ``query`` from the query string, ``route`` from the
        fragment
    """
    parsed = urlparse(url)
    return CallbackParams(
        query=_single_values(parsed.query),
        route=_single_values(parsed.fragment),
    )


class StaticParams:
    """Parameter source returning the same snapshot on every call."""

    def __init__(
        self,
        query: Mapping[str, Any] | None = None,
        route: Mapping[str, Any] | None = None,
    ):
        self._params = CallbackParams(query=query or {}, route=route or {})

    def current_params(self) -> CallbackParams:
        return self._params


class CallbackUrlSource:
    """Parameter source reading the current location from a callable.

    Args:
        location: Returns the current page URL each time it is called
    """

    def __init__(self, location: Callable[[], str]):
        self._location = location

    def current_params(self) -> CallbackParams:
        return params_from_url(self._location())
