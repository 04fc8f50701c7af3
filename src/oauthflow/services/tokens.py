"""Authorization code exchange against the token endpoint.

Implements RFC 6749 Section 4.1.3. A denial from the token endpoint is
returned as data; only a missing response is raised.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from oauthflow.models.config import ResolvedConfig
from oauthflow.models.errors import TokenExchangeTransportError
from oauthflow.models.tokens import (
    ExchangeFailure,
    ExchangeOutcome,
    ExchangeSuccess,
    TokenRequest,
)

logger = logging.getLogger(__name__)


class OAuth2TokenExchanger:
    """Exchanges authorization codes for tokens.

    Uses application/x-www-form-urlencoded encoding as required by
    RFC 6749. Owns its ``httpx.AsyncClient`` unless one is passed in.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the token exchanger.

        Args:
            timeout: HTTP request timeout in seconds
            http_client: Optional shared client; it is not closed by
                ``close()``
        """
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def exchange(self, config: ResolvedConfig, code: str) -> ExchangeOutcome:
        """Exchange an authorization code for a token payload.

        Args:
            config: Resolved provider configuration
            code: Authorization code from the callback

        Returns:
            ExchangeSuccess on a 2xx response, ExchangeFailure otherwise

        Raises:
            TokenExchangeTransportError: If no response was received
        """
        token_request = TokenRequest(
            token_endpoint=config.token_url,
            code=code,
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.token.redirect_uri,
        )
        form_data = token_request.to_form_data()

        # Log request details (without sensitive data)
        logger.debug(
            f"Token request to {token_request.token_endpoint}: "
            f"grant_type={form_data['grant_type']}, "
            f"client_id={form_data.get('client_id', 'none')}, "
            f"redirect_uri={form_data.get('redirect_uri', 'none')}"
        )

        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        try:
            response = await self._http_client.post(
                token_request.token_endpoint,
                data=form_data,
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise TokenExchangeTransportError(
                f"HTTP error during token exchange: {e}",
                url=token_request.token_endpoint,
            ) from e

        return self._to_outcome(response, token_request.token_endpoint)

    def _to_outcome(self, response: httpx.Response, url: str) -> ExchangeOutcome:
        body = self._decode_body(response)

        if 200 <= response.status_code < 300:
            logger.info("Token exchange successful")
            return ExchangeSuccess(body)

        error_code = "unknown_error"
        if isinstance(body, dict):
            error_code = body.get("error", error_code)
        logger.warning(
            f"Token exchange failed with {response.status_code}: {error_code}"
        )
        return ExchangeFailure(
            {
                "error": body,
                "status": response.status_code,
                "status_text": response.reason_phrase,
                "url": url,
            }
        )

    def _decode_body(self, response: httpx.Response) -> Any:
        """Decode a JSON body, falling back to the raw text."""
        try:
            return response.json()
        except ValueError:
            return response.text

    async def close(self) -> None:
        """Close the HTTP client if this exchanger created it."""
        if self._owns_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> OAuth2TokenExchanger:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
