"""
Client for the Liquid backend (passkey registration and authentication)
"""

import asyncio
import logging
from typing import Any, Dict

import requests

from .errors import BackendError

logger = logging.getLogger(__name__)


class LiquidAPI:
    """Handles passkey ceremonies and user records on the Liquid backend"""

    def __init__(self, api_base_url: str, api_key: str, timeout: float = 30):
        self.api_base_url = api_base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def get_registration_options(self, username: str) -> Dict[str, Any]:
        return await self._request("GET", "/registration/options", params={"user": username})

    async def verify_registration(self, username: str, registration_response: Dict[str, Any]) -> Dict[str, Any]:
        """Returns ``{"verified": bool, "publicKey": base64}``"""
        return await self._request(
            "POST",
            "/registration/verify",
            json={"userName": username, "registrationResponse": registration_response},
        )

    async def get_authentication_options(self, username: str) -> Dict[str, Any]:
        return await self._request("GET", "/authentication/options", params={"user": username})

    async def verify_authentication(self, username: str, authentication_response: Dict[str, Any]) -> Dict[str, Any]:
        """Returns ``{"success": bool}``"""
        return await self._request(
            "POST",
            "/authentication/verify",
            json={"userName": username, "authenticationResponse": authentication_response},
        )

    async def update_user_address(self, username: str, user_address: str) -> Dict[str, Any]:
        return await self._request(
            "PUT",
            "/user/update",
            json={"userName": username, "userAddress": user_address},
            headers={"X-API-Key": self.api_key},
        )

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.api_base_url}{path}"
        headers = {"Content-Type": "application/json", **kwargs.pop("headers", {})}

        try:
            response = await asyncio.to_thread(
                requests.request, method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BackendError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            try:
                message = response.json().get("error")
            except (ValueError, AttributeError):
                message = None
            logger.error(f"{method} {path} returned HTTP {response.status_code}: {message}")
            raise BackendError(message or f"HTTP error! status: {response.status_code}")

        return response.json()
