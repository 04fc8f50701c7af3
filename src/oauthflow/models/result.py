"""Outcome models returned by ``OAuth2AuthProvider.authenticate``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from pydantic import ValidationError

from oauthflow.models.tokens import TokenResponse


@dataclass(frozen=True)
class AuthResult:
    """Normalized result of a completed flow.

    ``messages`` are set only on success and ``errors`` only on failure.
    Both hold generic text; the server payload is reachable through
    ``raw_token`` (success) or ``response`` (failure).
    """

    success: bool
    messages: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    response: Any = None
    raw_token: Any = None
    redirect: str | None = None

    def is_success(self) -> bool:
        return self.success

    def is_failure(self) -> bool:
        return not self.success

    def token(self) -> TokenResponse | None:
        """Parse ``raw_token`` into a ``TokenResponse``.

        Returns None when there is no raw token or it does not look like a
        token payload.
        """
        if not isinstance(self.raw_token, Mapping):
            return None
        try:
            return TokenResponse.model_validate(dict(self.raw_token))
        except ValidationError:
            return None


@dataclass(frozen=True)
class RedirectInitiated:
    """The browser was sent to the authorization server.

    Returned instead of an ``AuthResult`` when the flow starts; the page is
    expected to unload, so nothing else will follow for this call.
    """

    url: str


AuthOutcome = Union[AuthResult, RedirectInitiated]
