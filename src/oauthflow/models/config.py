"""Provider configuration for the OAuth2 flow.

``OAuth2Options`` is the partial, caller-facing shape (camelCase keys
accepted, unknown keys ignored). ``resolve_config`` turns it into the
immutable ``ResolvedConfig`` every other component reads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from oauthflow.models.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_MESSAGES = ("You have been successfully authenticated.",)
DEFAULT_FAILURE_ERRORS = ("Something went wrong, please try again.",)


class ResponseType(str, Enum):
    """Value of the ``response_type`` authorize parameter."""

    CODE = "code"
    TOKEN = "token"


class GrantType(str, Enum):
    """Grant driven by the provider, derived from the response type."""

    AUTHORIZATION_CODE = "authorization_code"
    IMPLICIT = "implicit"

    @classmethod
    def from_response_type(cls, response_type: ResponseType) -> GrantType:
        if response_type is ResponseType.TOKEN:
            return cls.IMPLICIT
        return cls.AUTHORIZATION_CODE


class AuthorizeOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    endpoint: str | None = None
    response_type: ResponseType | None = Field(default=None, alias="responseType")
    redirect_uri: str | None = Field(default=None, alias="redirectUri")
    scope: str | None = None
    params: list[tuple[str, Any]] | None = None

    @field_validator("params", mode="before")
    @classmethod
    def params_to_pairs(cls, v: Any) -> Any:
        """Accept a mapping and keep its insertion order as pairs."""
        if isinstance(v, Mapping):
            return list(v.items())
        return v


class TokenOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    endpoint: str | None = None
    redirect_uri: str | None = Field(default=None, alias="redirectUri")


class RedirectOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: str | None = "/"
    failure: str | None = None


class OAuth2Options(BaseModel):
    """Partial provider options as supplied by the application."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    base_endpoint: str | None = Field(default=None, alias="baseEndpoint")
    client_id: str | None = Field(default=None, alias="clientId")
    client_secret: str | None = Field(default=None, alias="clientSecret")

    authorize: AuthorizeOptions = Field(default_factory=AuthorizeOptions)
    token: TokenOptions = Field(default_factory=TokenOptions)
    redirect: RedirectOptions = Field(default_factory=RedirectOptions)

    default_messages: list[str] | None = Field(default=None, alias="defaultMessages")
    default_errors: list[str] | None = Field(default=None, alias="defaultErrors")


@dataclass(frozen=True)
class AuthorizeConfig:
    endpoint: str = "authorize"
    response_type: ResponseType = ResponseType.CODE
    redirect_uri: str | None = None
    scope: str | None = None
    params: tuple[tuple[str, Any], ...] = ()


@dataclass(frozen=True)
class TokenConfig:
    endpoint: str = "token"
    redirect_uri: str | None = None


@dataclass(frozen=True)
class RedirectConfig:
    success: str | None = "/"
    failure: str | None = None


@dataclass(frozen=True)
class ResolvedConfig:
    """Immutable provider configuration with every default applied."""

    base_endpoint: str = ""
    client_id: str = ""
    client_secret: str | None = None
    authorize: AuthorizeConfig = field(default_factory=AuthorizeConfig)
    token: TokenConfig = field(default_factory=TokenConfig)
    redirect: RedirectConfig = field(default_factory=RedirectConfig)
    default_messages: tuple[str, ...] = DEFAULT_SUCCESS_MESSAGES
    default_errors: tuple[str, ...] = DEFAULT_FAILURE_ERRORS

    @property
    def grant_type(self) -> GrantType:
        return GrantType.from_response_type(self.authorize.response_type)

    @property
    def authorize_url_base(self) -> str:
        return f"{self.base_endpoint}{self.authorize.endpoint}"

    @property
    def token_url(self) -> str:
        return f"{self.base_endpoint}{self.token.endpoint}"

    def get_value(self, path: str, default: Any = None) -> Any:
        """Read a dotted attribute path such as ``"authorize.scope"``.

        Returns ``default`` when any segment is missing.
        """
        current: Any = self
        for part in path.split("."):
            if not hasattr(current, part):
                return default
            current = getattr(current, part)
        return current


def resolve_config(
    raw: OAuth2Options | Mapping[str, Any] | None = None,
) -> ResolvedConfig:
    """Merge caller options over the defaults.

    Args:
        raw: Partial options, either already validated or a plain mapping

    Returns:
        ResolvedConfig: Immutable configuration

    Raises:
        ConfigurationError: If the options fail validation
    """
    if raw is None:
        options = OAuth2Options()
    elif isinstance(raw, OAuth2Options):
        options = raw
    else:
        try:
            options = OAuth2Options.model_validate(dict(raw))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid OAuth2 options: {e}") from e

    authorize = options.authorize
    token = options.token
    redirect = options.redirect

    resolved = ResolvedConfig(
        base_endpoint=options.base_endpoint or "",
        client_id=options.client_id or "",
        client_secret=options.client_secret,
        authorize=AuthorizeConfig(
            endpoint=authorize.endpoint or AuthorizeConfig.endpoint,
            response_type=authorize.response_type or ResponseType.CODE,
            redirect_uri=authorize.redirect_uri,
            scope=authorize.scope,
            params=tuple(authorize.params or ()),
        ),
        token=TokenConfig(
            endpoint=token.endpoint or TokenConfig.endpoint,
            redirect_uri=token.redirect_uri,
        ),
        redirect=RedirectConfig(success=redirect.success, failure=redirect.failure),
        default_messages=tuple(
            options.default_messages
            if options.default_messages is not None
            else DEFAULT_SUCCESS_MESSAGES
        ),
        default_errors=tuple(
            options.default_errors
            if options.default_errors is not None
            else DEFAULT_FAILURE_ERRORS
        ),
    )

    logger.debug(
        f"Resolved OAuth2 config: grant_type={resolved.grant_type.value}, "
        f"base_endpoint={resolved.base_endpoint!r}"
    )
    return resolved
