"""OAuth2 authorization code and implicit flow provider.

Classifies the current page, then either starts the flow by redirecting
to the authorization server or finishes it by turning the callback into
an ``AuthResult``, exchanging the code first when the grant needs it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from oauthflow.models.config import OAuth2Options, ResolvedConfig, resolve_config
from oauthflow.models.flow import (
    CodeCallback,
    ErrorCallback,
    FlowState,
    Fresh,
    TokenCallback,
)
from oauthflow.models.result import AuthOutcome, AuthResult, RedirectInitiated
from oauthflow.primitives.authorize import build_authorize_url
from oauthflow.primitives.callback import ParameterSource
from oauthflow.primitives.classifier import classify
from oauthflow.services.navigation import NavigationSink
from oauthflow.services.results import ResultBuilder
from oauthflow.services.tokens import OAuth2TokenExchanger

logger = logging.getLogger(__name__)


class OAuth2AuthProvider:
    """Drives a browser through the OAuth2 code or implicit grant.

    Holds no state between ``authenticate()`` calls other than its
    configuration: every call reclassifies from the parameters the host
    currently supplies.
    """

    def __init__(
        self,
        navigator: NavigationSink,
        params_source: ParameterSource,
        options: OAuth2Options | Mapping[str, Any] | None = None,
        exchanger: OAuth2TokenExchanger | None = None,
        timeout: float = 30.0,
    ):
        """Initialize the provider.

        Args:
            navigator: Sink written to when the flow starts
            params_source: Supplies the current query and route parameters
            options: Provider options, see ``OAuth2Options``
            exchanger: Token exchanger; when omitted one is created on the
                first code callback
            timeout: HTTP timeout for a created exchanger
        """
        self.navigator = navigator
        self.params_source = params_source
        self.timeout = timeout
        self._exchanger = exchanger
        self._owns_exchanger = exchanger is None
        self._config = resolve_config(options)

    @property
    def exchanger(self) -> OAuth2TokenExchanger:
        if self._exchanger is None:
            self._exchanger = OAuth2TokenExchanger(timeout=self.timeout)
        return self._exchanger

    @property
    def config(self) -> ResolvedConfig:
        return self._config

    def set_config(self, options: OAuth2Options | Mapping[str, Any] | None) -> None:
        """Replace the configuration. Calls already running keep the old one."""
        self._config = resolve_config(options)

    def get_config_value(self, path: str, default: Any = None) -> Any:
        return self._config.get_value(path, default)

    async def authenticate(self) -> AuthOutcome:
        """Advance the flow for the current page.

        Returns:
            RedirectInitiated when the flow was just started, otherwise the
            AuthResult of the callback

        Raises:
            TokenExchangeTransportError: If the token endpoint could not be
                reached
        """
        config = self._config
        params = self.params_source.current_params()
        state = classify(params.query, params.route)

        if isinstance(state, Fresh):
            return self._start(config)
        return await self._finish(config, state)

    def _start(self, config: ResolvedConfig) -> RedirectInitiated:
        url = build_authorize_url(config)
        logger.info(
            f"Redirecting to authorization server for {config.grant_type.value} grant"
        )
        self.navigator.navigate(url)
        return RedirectInitiated(url)

    async def _finish(self, config: ResolvedConfig, state: FlowState) -> AuthResult:
        results = ResultBuilder(config)

        if isinstance(state, CodeCallback):
            logger.debug("Exchanging authorization code for tokens")
            outcome = await self.exchanger.exchange(config, state.code)
            return results.from_exchange(outcome)

        if isinstance(state, TokenCallback):
            logger.info("Received access token in callback")
            return results.from_token_callback(state.fields)

        if isinstance(state, ErrorCallback):
            logger.warning(
                f"Authorization callback contained error: {state.fields.get('error')}"
            )
            return results.from_error_callback(state.fields)

        raise TypeError(f"Unhandled flow state: {state!r}")

    async def close(self) -> None:
        """Close the token exchanger if this provider created it."""
        if self._owns_exchanger and self._exchanger is not None:
            await self._exchanger.close()
            self._exchanger = None

    async def __aenter__(self) -> OAuth2AuthProvider:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
