"""Management API client and authentication"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

import aiohttp
from pydantic import ValidationError

from ..configuration import ManagementApiConfig
from ..error_handling import AuthenticationError, ListingError, NotAuthenticatedError
from .models import Application, LoginToken

logger = logging.getLogger(__name__)

USER_AGENT = "apim-cli/0.1.0"

# Milliseconds between two emitted applications
DEFAULT_DELAY_PERIOD = 50


@dataclass
class ManagementApi:
    """Management API client holding one authenticated session."""

    config: ManagementApiConfig
    session: aiohttp.ClientSession
    token: Optional[str] = None

    @classmethod
    def create(cls, config: ManagementApiConfig) -> "ManagementApi":
        """Create a client with its own session. Must run inside an event loop."""
        timeout = aiohttp.ClientTimeout(total=config.timeout)
        connector = aiohttp.TCPConnector(ssl=config.verify_ssl)
        session = aiohttp.ClientSession(timeout=timeout, connector=connector)
        return cls(config=config, session=session)

    async def __aenter__(self) -> "ManagementApi":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if not self.session.closed:
            await self.session.close()

    @property
    def authenticated(self) -> bool:
        return self.token is not None

    def _url(self, endpoint: str) -> str:
        return f"{self.config.base_url}/{endpoint.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def login(self, username: str, password: str) -> LoginToken:
        """Authenticate with HTTP Basic credentials and keep the session token."""
        url = self._url("user/login")
        logger.debug(f"🔐 Logging in as {username} at {url}")

        try:
            async with self.session.post(
                url, auth=aiohttp.BasicAuth(username, password), headers=self._headers()
            ) as response:
                if response.status in (401, 403):
                    raise AuthenticationError(
                        f"invalid credentials for user '{username}'", status=response.status
                    )
                if response.status >= 300:
                    raise AuthenticationError(
                        f"unexpected response from {url}", status=response.status
                    )
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise AuthenticationError(f"could not reach {url}: {str(e) or type(e).__name__}") from e
        except ValueError as e:
            raise AuthenticationError(f"invalid login response: {e}") from e

        try:
            login_token = LoginToken.model_validate(payload)
        except ValidationError as e:
            raise AuthenticationError("login response carries no token") from e

        self.token = login_token.token
        logger.info(f"✅ Logged in as {username}")
        return login_token

    async def _get_json(self, endpoint: str) -> Any:
        url = self._url(endpoint)
        logger.debug(f"GET {url}")
        try:
            async with self.session.get(url, headers=self._headers()) as response:
                if response.status >= 300:
                    raise ListingError(f"unexpected response from {url}", status=response.status)
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ListingError(f"could not reach {url}: {str(e) or type(e).__name__}") from e
        except ValueError as e:
            raise ListingError(f"invalid response from {url}: {e}") from e

    async def list_applications(
        self, delay_period: int = DEFAULT_DELAY_PERIOD
    ) -> AsyncIterator[Application]:
        """Yield every application visible to the logged-in user.

        Args:
            delay_period: Milliseconds to wait before emitting each
                application; 0 emits them without delay.

        Raises:
            NotAuthenticatedError: if ``login`` has not succeeded
            ListingError: if the request fails or the body is not a list
        """
        if not self.authenticated:
            raise NotAuthenticatedError("login is required before listing applications")
        if delay_period < 0:
            raise ValueError(f"delay_period must be >= 0, got {delay_period}")

        payload = await self._get_json("applications")

        # Plain array, or a page object wrapping the array in "data"
        items = payload.get("data") if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise ListingError("applications response is not a list")
        logger.debug(f"Received {len(items)} applications")

        for item in items:
            if delay_period > 0:
                await asyncio.sleep(delay_period / 1000)
            try:
                application = Application.model_validate(item)
            except ValidationError as e:
                raise ListingError(f"malformed application entry: {e}") from e
            yield application
