"""Tests for the OAuth2 flow provider.

End-to-end scenarios through ``authenticate()``:
- Redirect to the authorization server on a fresh page
- Code callback exchanged at the token endpoint
- Implicit token callback returned without a network call
- Error callbacks and token endpoint denials
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import quote

import httpx
import pytest

from oauthflow.models.errors import TokenExchangeTransportError
from oauthflow.models.result import AuthResult, RedirectInitiated
from oauthflow.primitives.callback import CallbackUrlSource, StaticParams
from oauthflow.provider import OAuth2AuthProvider
from oauthflow.services.navigation import RecordingNavigator
from oauthflow.services.tokens import OAuth2TokenExchanger

SUCCESS_MESSAGES = ("You have been successfully authenticated.",)
ERROR_MESSAGES = ("Something went wrong, please try again.",)

TOKEN_SUCCESS_RESPONSE = {
    "access_token": "2YotnFZFEjr1zCsicMWpAA",
    "expires_in": 3600,
    "refresh_token": "tGzv3JOkF0XG5Qx2TlKWIA",
    "example_parameter": "example_value",
}

TOKEN_ERROR_RESPONSE = {
    "error": "unauthorized_client",
    "error_description": "unauthorized",
    "error_uri": "some",
}

CODE_OPTIONS = {
    "baseEndpoint": "http://example.com/",
    "clientId": "clientId",
    "clientSecret": "clientSecret",
}

TOKEN_OPTIONS = {
    **CODE_OPTIONS,
    "authorize": {"responseType": "token"},
}

CONFIGURED_OPTIONS = {
    **CODE_OPTIONS,
    "redirect": {"success": "/success", "failure": "/failure"},
    "authorize": {
        "redirectUri": "http://localhost:4200/callback",
        "scope": "read",
        "params": {"display": "popup", "foo": "bar"},
    },
    "token": {"redirectUri": "http://localhost:4200/callback"},
}


def make_response(status_code: int, body: dict) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.reason_phrase = "OK" if status_code < 300 else "Bad Request"
    response.json.return_value = body
    return response


class ProviderTestBase:
    options: dict = CODE_OPTIONS

    def setup_method(self):
        # Arrange
        self.navigator = RecordingNavigator()
        self.exchanger = OAuth2TokenExchanger()
        self.exchanger._http_client = AsyncMock()
        self.http = self.exchanger._http_client

    def make_provider(self, query=None, route=None) -> OAuth2AuthProvider:
        return OAuth2AuthProvider(
            self.navigator,
            StaticParams(query=query, route=route),
            options=self.options,
            exchanger=self.exchanger,
        )

    def sent_form(self) -> dict:
        return self.http.post.call_args[1]["data"]


class TestAuthorizationCodeDefaults(ProviderTestBase):
    """Out of the box configuration: authorization code grant."""

    async def test_fresh_page_redirects_to_auth_server(self):
        # Act
        outcome = await self.make_provider().authenticate()

        # Assert
        expected = "http://example.com/authorize?response_type=code&client_id=clientId"
        assert self.navigator.location == expected
        assert outcome == RedirectInitiated(expected)
        self.http.post.assert_not_called()

    async def test_code_callback_sends_correct_token_request(self):
        # Arrange
        self.http.post.return_value = make_response(200, TOKEN_SUCCESS_RESPONSE)

        # Act
        result = await self.make_provider(query={"code": "code"}).authenticate()

        # Assert
        assert isinstance(result, AuthResult)
        assert result.is_success()
        assert not result.is_failure()
        assert result.messages == SUCCESS_MESSAGES
        assert result.errors == ()
        assert result.raw_token == TOKEN_SUCCESS_RESPONSE
        assert result.response is None
        assert result.redirect == "/"

        self.http.post.assert_awaited_once()
        assert self.http.post.call_args[0][0] == "http://example.com/token"
        form = self.sent_form()
        assert form["grant_type"] == "authorization_code"
        assert form["code"] == "code"
        assert form["client_id"] == "clientId"
        assert form["client_secret"] == "clientSecret"
        assert "redirect_uri" not in form
        assert self.navigator.location is None

    async def test_error_callback_returns_failure_without_request(self):
        # Act
        result = await self.make_provider(query=TOKEN_ERROR_RESPONSE).authenticate()

        # Assert
        assert result.is_failure()
        assert result.response == TOKEN_ERROR_RESPONSE
        assert result.messages == ()
        assert result.errors == ERROR_MESSAGES
        assert result.raw_token is None
        assert result.redirect is None
        self.http.post.assert_not_called()

    async def test_token_endpoint_denial_nests_body_under_error(self):
        # Arrange
        self.http.post.return_value = make_response(400, TOKEN_ERROR_RESPONSE)

        # Act
        result = await self.make_provider(query={"code": "code"}).authenticate()

        # Assert
        assert result.is_failure()
        assert result.response["error"] == TOKEN_ERROR_RESPONSE
        assert result.response["status"] == 400
        assert result.messages == ()
        assert result.errors == ERROR_MESSAGES
        assert result.raw_token is None
        assert result.redirect is None

    async def test_transport_fault_is_raised(self):
        # Arrange
        self.http.post.side_effect = httpx.ConnectError("connection refused")

        # Act & Assert
        with pytest.raises(TokenExchangeTransportError) as exc_info:
            await self.make_provider(query={"code": "code"}).authenticate()

        assert exc_info.value.url == "http://example.com/token"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_cancelled_exchange_delivers_no_result(self):
        # Arrange
        started = asyncio.Event()

        async def slow_post(*args, **kwargs):
            started.set()
            await asyncio.sleep(10)

        self.http.post.side_effect = slow_post
        task = asyncio.create_task(
            self.make_provider(query={"code": "code"}).authenticate()
        )
        await started.wait()

        # Act
        task.cancel()

        # Assert
        with pytest.raises(asyncio.CancelledError):
            await task
        self.http.post.assert_awaited_once()


class TestImplicitGrant(ProviderTestBase):
    """Configured with response type ``token``."""

    options = TOKEN_OPTIONS

    async def test_fresh_page_redirects_with_token_response_type(self):
        # Act
        await self.make_provider().authenticate()

        # Assert
        assert (
            self.navigator.location
            == "http://example.com/authorize?response_type=token&client_id=clientId"
        )

    async def test_token_callback_returns_raw_token(self):
        # Arrange
        token = {"access_token": "token", "token_type": "bearer"}

        # Act
        result = await self.make_provider(route=token).authenticate()

        # Assert
        assert result.is_success()
        assert result.messages == SUCCESS_MESSAGES
        assert result.errors == ()
        assert result.raw_token == token
        assert result.redirect == "/"
        self.http.post.assert_not_called()

    async def test_route_error_callback_returns_failure(self):
        # Act
        result = await self.make_provider(route=TOKEN_ERROR_RESPONSE).authenticate()

        # Assert
        assert result.is_failure()
        assert result.response == TOKEN_ERROR_RESPONSE
        assert result.errors == ERROR_MESSAGES
        assert result.raw_token is None
        assert result.redirect is None


class TestConfiguredProvider(ProviderTestBase):
    """Redirects, redirect URIs, scope and extra params configured."""

    options = CONFIGURED_OPTIONS

    async def test_fresh_page_redirect_url_contains_all_fields_in_order(self):
        # Act
        await self.make_provider().authenticate()

        # Assert
        redirect = quote("http://localhost:4200/callback", safe="")
        assert self.navigator.location == (
            "http://example.com/authorize?response_type=code&client_id=clientId"
            f"&redirect_uri={redirect}&scope=read&display=popup&foo=bar"
        )

    async def test_code_callback_sends_token_redirect_uri(self):
        # Arrange
        self.http.post.return_value = make_response(200, TOKEN_SUCCESS_RESPONSE)

        # Act
        result = await self.make_provider(query={"code": "code"}).authenticate()

        # Assert
        assert result.is_success()
        assert result.raw_token == TOKEN_SUCCESS_RESPONSE
        assert result.redirect == "/success"
        assert self.sent_form()["redirect_uri"] == "http://localhost:4200/callback"

    async def test_error_callback_uses_failure_redirect(self):
        # Act
        result = await self.make_provider(query=TOKEN_ERROR_RESPONSE).authenticate()

        # Assert
        assert result.is_failure()
        assert result.response == TOKEN_ERROR_RESPONSE
        assert result.redirect == "/failure"

    async def test_token_endpoint_denial_uses_failure_redirect(self):
        # Arrange
        self.http.post.return_value = make_response(400, TOKEN_ERROR_RESPONSE)

        # Act
        result = await self.make_provider(query={"code": "code"}).authenticate()

        # Assert
        assert result.response["error"] == TOKEN_ERROR_RESPONSE
        assert result.errors == ERROR_MESSAGES
        assert result.redirect == "/failure"


class TestProviderConfiguration(ProviderTestBase):
    """Configuration handling across calls."""

    async def test_set_config_applies_to_next_call(self):
        # Arrange
        provider = self.make_provider()
        provider.set_config(TOKEN_OPTIONS)

        # Act
        await provider.authenticate()

        # Assert
        assert "response_type=token" in self.navigator.location
        assert provider.get_config_value("authorize.response_type").value == "token"

    async def test_each_call_reclassifies_current_location(self):
        # Arrange
        location = {"url": "http://localhost:4200/callback"}
        provider = OAuth2AuthProvider(
            self.navigator,
            CallbackUrlSource(lambda: location["url"]),
            options=TOKEN_OPTIONS,
            exchanger=self.exchanger,
        )

        # Act
        first = await provider.authenticate()
        location["url"] = (
            "http://localhost:4200/callback#access_token=abc&token_type=bearer"
        )
        second = await provider.authenticate()

        # Assert
        assert isinstance(first, RedirectInitiated)
        assert second.is_success()
        assert second.raw_token == {"access_token": "abc", "token_type": "bearer"}

    async def test_close_leaves_injected_exchanger_open(self):
        # Arrange
        provider = self.make_provider()

        # Act
        await provider.close()

        # Assert
        self.http.aclose.assert_not_called()


class TestProviderExchangerLifecycle:
    """The provider creates its own exchanger only when a code arrives."""

    async def test_implicit_flow_creates_no_http_client(self):
        # Arrange
        provider = OAuth2AuthProvider(
            RecordingNavigator(),
            StaticParams(route={"access_token": "t"}),
            options=TOKEN_OPTIONS,
        )

        # Act
        result = await provider.authenticate()
        await provider.close()

        # Assert
        assert result.is_success()
        assert provider._exchanger is None

    async def test_exchanger_created_on_first_access_and_closed(self):
        # Arrange
        provider = OAuth2AuthProvider(RecordingNavigator(), StaticParams())
        exchanger = provider.exchanger
        exchanger._http_client = AsyncMock()

        # Act
        await provider.close()

        # Assert
        assert provider.exchanger is not exchanger
        exchanger._http_client.aclose.assert_awaited_once()
