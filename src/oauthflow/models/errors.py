"""Exception hierarchy for OAuth2 flow errors.

Protocol denials are never raised: they come back as failed
``AuthResult`` objects. Only conditions that carry no protocol payload
are exceptions.
"""

from __future__ import annotations


class OAuth2Error(Exception):
    """Base exception for all OAuth2 flow errors."""

    pass


class ConfigurationError(OAuth2Error):
    """Raised when provider options cannot be resolved."""

    pass


class TokenError(OAuth2Error):
    """Raised when token operations fail."""

    pass


class TokenExchangeError(TokenError):
    """Raised when authorization code to token exchange fails."""

    pass


class TokenExchangeTransportError(TokenExchangeError):
    """Raised when the token endpoint could not be reached at all.

    Distinct from a denial by the token endpoint, which is returned as
    data. There is no response body to attach here.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url
