"""Assembly of ``AuthResult`` objects from terminal flow states."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from oauthflow.models.config import ResolvedConfig
from oauthflow.models.result import AuthResult
from oauthflow.models.tokens import ExchangeOutcome, ExchangeSuccess


class ResultBuilder:
    """Builds results for one provider configuration.

    Success results carry the configured default messages and failure
    results the default errors, whatever the server sent.
    """

    def __init__(self, config: ResolvedConfig):
        self.config = config

    def from_code_exchange_success(self, payload: Any) -> AuthResult:
        return self._success(payload)

    def from_code_exchange_failure(self, payload: Any) -> AuthResult:
        return self._failure(payload)

    def from_token_callback(self, fields: Mapping[str, Any]) -> AuthResult:
        return self._success(fields)

    def from_error_callback(self, fields: Mapping[str, Any]) -> AuthResult:
        return self._failure(fields)

    def from_exchange(self, outcome: ExchangeOutcome) -> AuthResult:
        if isinstance(outcome, ExchangeSuccess):
            return self.from_code_exchange_success(outcome.payload)
        return self.from_code_exchange_failure(outcome.payload)

    def _success(self, raw_token: Any) -> AuthResult:
        return AuthResult(
            success=True,
            messages=self.config.default_messages,
            raw_token=raw_token,
            redirect=self.config.redirect.success,
        )

    def _failure(self, response: Any) -> AuthResult:
        return AuthResult(
            success=False,
            errors=self.config.default_errors,
            response=response,
            redirect=self.config.redirect.failure,
        )
