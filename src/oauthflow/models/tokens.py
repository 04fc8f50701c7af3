"""Token endpoint models for the authorization code exchange."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

from oauthflow.models.config import GrantType


@dataclass(frozen=True)
class TokenRequest:
    """Token exchange request parameters (RFC 6749 Section 4.1.3)."""

    token_endpoint: str
    code: str
    client_id: str

    client_secret: str | None = None
    redirect_uri: str | None = None
    grant_type: str = GrantType.AUTHORIZATION_CODE.value

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for application/x-www-form-urlencoded request.

        Optional fields that are not configured are left out entirely
        rather than sent empty.
        """
        data = {
            "grant_type": self.grant_type,
            "code": self.code,
        }

        if self.client_id:
            data["client_id"] = self.client_id
        if self.client_secret:
            data["client_secret"] = self.client_secret
        if self.redirect_uri:
            data["redirect_uri"] = self.redirect_uri

        return data


class TokenResponse(BaseModel):
    """Typed view over a token payload (RFC 6749 Section 5).

    Unknown fields such as ``example_parameter`` are kept as extras.
    """

    model_config = ConfigDict(extra="allow")

    access_token: str | None = None
    token_type: str | None = None
    expires_in: int | None = None
    refresh_token: str | None = None
    scope: str | None = None

    error: str | None = None
    error_description: str | None = None
    error_uri: str | None = None

    def is_success(self) -> bool:
        return self.error is None and self.access_token is not None

    def is_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class ExchangeSuccess:
    """Token endpoint answered 2xx; ``payload`` is the decoded body."""

    payload: Any


@dataclass(frozen=True)
class ExchangeFailure:
    """Token endpoint answered non-2xx.

    ``payload`` is the HTTP error envelope with the decoded body nested
    under ``"error"``.
    """

    payload: Any


ExchangeOutcome = Union[ExchangeSuccess, ExchangeFailure]
