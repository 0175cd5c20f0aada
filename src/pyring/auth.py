"""Async Authentication handler for pyring."""

import asyncio
import logging
import time
import uuid

import aiohttp

from .const import (
    CLIENT_ID,
    DEFAULT_SCOPE,
    OAUTH_URL,
    TOKEN_REFRESH_BUFFER,
)
from .exceptions import ApiError, AuthError, TwoFactorAuthRequired

_LOGGER = logging.getLogger(__name__)


class AuthHandler:
    """Handles async authentication and token management using aiohttp."""

    def __init__(
        self,
        username: str,
        password: str,
        session: aiohttp.ClientSession | None = None,
        two_factor_code: str | None = None,
        refresh_token: str | None = None,
        hardware_id: str | None = None,
        scope: str = DEFAULT_SCOPE,
    ) -> None:
        """Initialize the authentication handler."""
        self._username = username
        self._password = password
        self._two_factor_code = two_factor_code
        self._scope = scope
        self.hardware_id = hardware_id or str(uuid.uuid4())
        self._access_token: str | None = None
        self._refresh_token: str | None = refresh_token
        self._token_expires_at: float | None = None
        # Use provided session or create a new one
        self._session = session
        self._managed_session = session is None

    @property
    def refresh_token(self) -> str | None:
        """Return the refresh token, so callers can persist it between runs."""
        return self._refresh_token

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            _LOGGER.debug("Creating new aiohttp ClientSession for AuthHandler.")
            self._session = aiohttp.ClientSession()
            self._managed_session = True
        return self._session

    async def close_session(self) -> None:
        """Close the aiohttp session if it's managed by this instance."""
        if self._session and not self._session.closed and self._managed_session:
            await self._session.close()
            self._session = None
            _LOGGER.debug("Managed aiohttp session closed by AuthHandler.")
        elif self._session and not self._managed_session:
            _LOGGER.debug("Session provided externally, not closing.")

    def _is_token_expired(self) -> bool:
        """Check if the access token is expired or close to expiring."""
        if not self._token_expires_at:
            return True
        return time.time() >= (self._token_expires_at - TOKEN_REFRESH_BUFFER)

    async def get_access_token(self) -> str:
        """Return the current access token, refreshing if necessary."""
        if not self._access_token or self._is_token_expired():
            if self._refresh_token:
                try:
                    await self._refresh_access_token()
                except AuthError:
                    _LOGGER.warning(
                        "Token refresh failed, attempting full authentication.",
                    )
                    await self.authenticate()
            else:
                _LOGGER.debug(
                    "No refresh token available, performing full authentication.",
                )
                await self.authenticate()

        if not self._access_token:
            err_msg = "Failed to obtain a valid access token."
            raise AuthError(err_msg)

        return self._access_token

    async def authenticate(self) -> None:
        """Perform a password grant to get access and refresh tokens."""
        payload = {
            "client_id": CLIENT_ID,
            "scope": self._scope,
            "grant_type": "password",
            "username": self._username,
            "password": self._password,
        }
        headers = {
            "2fa-support": "true",
            "2fa-code": self._two_factor_code or "",
            "hardware_id": self.hardware_id,
        }
        await self._request_token(payload, headers)
        # A two-factor code is single use
        self._two_factor_code = None
        _LOGGER.info("Authentication successful. Access token obtained.")

    async def _refresh_access_token(self) -> None:
        """Refresh the access token using the refresh token."""
        if not self._refresh_token:
            err_msg = "Cannot refresh token: No refresh token available."
            raise AuthError(err_msg)

        payload = {
            "client_id": CLIENT_ID,
            "scope": self._scope,
            "grant_type": "refresh_token",
            "refresh_token": self._refresh_token,
        }
        _LOGGER.info("Refreshing access token...")
        try:
            await self._request_token(payload, {"hardware_id": self.hardware_id})
        except AuthError:
            self._access_token = None
            self._refresh_token = None
            self._token_expires_at = None
            raise
        _LOGGER.info("Access token refreshed successfully.")

    async def _request_token(self, payload: dict, headers: dict) -> None:
        """Post a grant to the OAuth endpoint and store the returned tokens."""
        session = await self._get_session()
        grant_type = payload["grant_type"]

        try:
            _LOGGER.debug("Requesting token from %s (%s)", OAUTH_URL, grant_type)
            async with session.post(
                OAUTH_URL,
                json=payload,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=10),
            ) as response:
                if response.status == 412:
                    # Ring wants a two-factor code, it has sent one to the user
                    try:
                        error_data = await response.json()
                    except (aiohttp.ContentTypeError, ValueError):
                        error_data = {}
                    prompt = error_data.get("tsv_state") or "verification code"
                    if error_data.get("phone"):
                        prompt = f"{prompt} sent to {error_data['phone']}"
                    raise TwoFactorAuthRequired(prompt)

                if response.status >= 400:
                    error_text = await response.text()
                    _LOGGER.error(
                        "HTTP error %s during %s grant: %s",
                        response.status,
                        grant_type,
                        error_text,
                    )
                    try:
                        error_data = await response.json()
                    except (aiohttp.ContentTypeError, ValueError):
                        raise ApiError(response.status, error_text) from None
                    if response.status in (400, 401):
                        err_msg = (
                            f"Authentication failed: "
                            f"{error_data.get('error_description') or error_data.get('error')}"
                        )
                        raise AuthError(err_msg)
                    raise ApiError(response.status, error_data.get("error", error_text))

                token_data = await response.json()

        except (AuthError, ApiError):
            raise
        except aiohttp.ClientError as req_err:
            _LOGGER.error("Request error during %s grant: %s", grant_type, req_err)
            err_msg = f"Authentication failed: Request error - {req_err}"
            raise AuthError(err_msg) from req_err
        except asyncio.TimeoutError as timeout_err:
            _LOGGER.error("Timeout during %s grant request", grant_type)
            err_msg = "Authentication failed: Request timed out"
            raise AuthError(err_msg) from timeout_err

        if "access_token" not in token_data:
            err_msg = "Authentication failed: Missing access token in response"
            raise AuthError(err_msg)

        self._access_token = token_data["access_token"]
        self._refresh_token = token_data.get("refresh_token", self._refresh_token)
        expires_in = token_data.get("expires_in")
        if expires_in:
            self._token_expires_at = time.time() + int(expires_in)
            _LOGGER.debug("Token expires at: %s", self._token_expires_at)
        else:
            self._token_expires_at = None
            _LOGGER.warning("No 'expires_in' found in token response.")
