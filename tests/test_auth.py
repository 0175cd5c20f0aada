"""Tests for the Ring authentication handler."""

import time
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from pyring.auth import AuthHandler
from pyring.const import CLIENT_ID, OAUTH_URL, TOKEN_REFRESH_BUFFER
from pyring.exceptions import ApiError, AuthError, TwoFactorAuthRequired


@pytest.fixture
def successful_token_response():
    """Mock successful token response."""
    return {
        "access_token": "new_test_token_12345",
        "refresh_token": "refresh_token_678",
        "expires_in": 3600,
        "scope": "client",
        "token_type": "Bearer",
    }


@pytest.fixture
def auth(mock_session):
    return AuthHandler(
        "test@example.com",
        "test_password",
        session=mock_session,
        hardware_id="hardware-1",
    )


def posted_payloads(mock_session):
    return [call.kwargs["json"] for call in mock_session.post.call_args_list]


class TestTokenExpiry:
    """Tests for _is_token_expired."""

    def test_expired_without_token(self, auth):
        assert auth._is_token_expired() is True

    def test_expired_near_expiry(self, auth):
        auth._token_expires_at = time.time() + TOKEN_REFRESH_BUFFER / 2
        assert auth._is_token_expired() is True

    def test_valid(self, auth):
        auth._token_expires_at = time.time() + 3600
        assert auth._is_token_expired() is False


class TestAuthenticate:
    """Tests for the password grant."""

    @pytest.mark.asyncio
    async def test_successful_authentication(
        self, auth, mock_session, successful_token_response, mock_response
    ):
        mock_session.post = MagicMock(
            return_value=mock_response(json_data=successful_token_response)
        )

        token = await auth.get_access_token()
        again = await auth.get_access_token()

        assert token == again == "new_test_token_12345"
        assert auth.refresh_token == "refresh_token_678"
        mock_session.post.assert_called_once()
        args, kwargs = mock_session.post.call_args
        assert args == (OAUTH_URL,)
        assert kwargs["json"] == {
            "client_id": CLIENT_ID,
            "scope": "client",
            "grant_type": "password",
            "username": "test@example.com",
            "password": "test_password",
        }
        assert kwargs["headers"]["hardware_id"] == "hardware-1"
        assert kwargs["headers"]["2fa-support"] == "true"

    @pytest.mark.asyncio
    async def test_two_factor_required(self, auth, mock_session, mock_response):
        mock_session.post = MagicMock(
            return_value=mock_response(
                status=412, json_data={"tsv_state": "sms", "phone": "+xxxxxxx1234"}
            )
        )

        with pytest.raises(TwoFactorAuthRequired) as exc_info:
            await auth.authenticate()

        assert exc_info.value.prompt == "sms sent to +xxxxxxx1234"
        assert isinstance(exc_info.value, AuthError)

    @pytest.mark.asyncio
    async def test_two_factor_code_is_sent_once(
        self, mock_session, successful_token_response, mock_response
    ):
        auth = AuthHandler(
            "test@example.com",
            "test_password",
            session=mock_session,
            two_factor_code="123456",
        )
        mock_session.post = MagicMock(
            return_value=mock_response(json_data=successful_token_response)
        )

        await auth.authenticate()
        await auth.authenticate()

        codes = [
            call.kwargs["headers"]["2fa-code"]
            for call in mock_session.post.call_args_list
        ]
        assert codes == ["123456", ""]

    @pytest.mark.asyncio
    async def test_invalid_credentials(self, auth, mock_session, mock_response):
        mock_session.post = MagicMock(
            return_value=mock_response(
                status=401,
                json_data={"error": "invalid_grant", "error_description": "bad"},
                text="invalid_grant",
            )
        )

        with pytest.raises(AuthError, match="bad"):
            await auth.authenticate()

    @pytest.mark.asyncio
    async def test_server_error(self, auth, mock_session, mock_response):
        mock_session.post = MagicMock(
            return_value=mock_response(
                status=503, json_data={"error": "unavailable"}, text="unavailable"
            )
        )

        with pytest.raises(ApiError) as exc_info:
            await auth.authenticate()

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_request_error(self, auth, mock_session):
        mock_session.post = MagicMock(
            side_effect=aiohttp.ClientConnectionError("unreachable")
        )

        with pytest.raises(AuthError, match="Request error"):
            await auth.authenticate()

    @pytest.mark.asyncio
    async def test_missing_access_token(self, auth, mock_session, mock_response):
        mock_session.post = MagicMock(
            return_value=mock_response(json_data={"refresh_token": "r"})
        )

        with pytest.raises(AuthError, match="Missing access token"):
            await auth.authenticate()


class TestRefresh:
    """Tests for the refresh token grant."""

    @pytest.mark.asyncio
    async def test_refresh_token_is_used_first(
        self, mock_session, successful_token_response, mock_response
    ):
        auth = AuthHandler(
            "test@example.com",
            "test_password",
            session=mock_session,
            refresh_token="saved_refresh_token",
        )
        mock_session.post = MagicMock(
            return_value=mock_response(json_data=successful_token_response)
        )

        assert await auth.get_access_token() == "new_test_token_12345"

        assert posted_payloads(mock_session) == [
            {
                "client_id": CLIENT_ID,
                "scope": "client",
                "grant_type": "refresh_token",
                "refresh_token": "saved_refresh_token",
            }
        ]

    @pytest.mark.asyncio
    async def test_failed_refresh_falls_back_to_password(
        self, mock_session, successful_token_response, mock_response
    ):
        auth = AuthHandler(
            "test@example.com",
            "test_password",
            session=mock_session,
            refresh_token="revoked",
        )
        mock_session.post = MagicMock(
            side_effect=[
                mock_response(
                    status=400,
                    json_data={"error": "invalid_grant"},
                    text="invalid_grant",
                ),
                mock_response(json_data=successful_token_response),
            ]
        )

        assert await auth.get_access_token() == "new_test_token_12345"

        grants = [payload["grant_type"] for payload in posted_payloads(mock_session)]
        assert grants == ["refresh_token", "password"]
        assert auth.refresh_token == "refresh_token_678"

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed(
        self, auth, mock_session, successful_token_response, mock_response
    ):
        auth._access_token = "old"
        auth._refresh_token = "refresh"
        auth._token_expires_at = time.time() - 1
        mock_session.post = MagicMock(
            return_value=mock_response(json_data=successful_token_response)
        )

        assert await auth.get_access_token() == "new_test_token_12345"
        assert posted_payloads(mock_session)[0]["grant_type"] == "refresh_token"


class TestSession:
    """Tests for session ownership."""

    @pytest.mark.asyncio
    async def test_external_session_is_not_closed(self, auth, mock_session):
        mock_session.close = AsyncMock()

        await auth.close_session()

        mock_session.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_managed_session_is_closed(self):
        auth = AuthHandler("test@example.com", "test_password")

        session = await auth._get_session()
        assert await auth._get_session() is session

        await auth.close_session()
        assert session.closed
