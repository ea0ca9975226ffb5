import base64
import binascii
import json
from typing import Any

import httpx

from complyscan.accounts.base import BaseIdentityProvider
from complyscan.accounts.exceptions import AuthenticationError, IdentityProviderError
from complyscan.accounts.models import Principal, UserAccount
from complyscan.logging.logger import Log


def read_session_claims(token: str) -> dict[str, Any]:
    """Decode the payload of a Clerk session JWT without verifying it.

    The session is verified afterwards against the Backend API, so only the
    ``sid`` and ``sub`` claims are needed here.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Malformed session token")
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload))
    except (binascii.Error, ValueError) as exc:
        raise AuthenticationError("Malformed session token") from exc
    if not isinstance(claims, dict):
        raise AuthenticationError("Malformed session token")
    return claims


class ClerkAdapter(BaseIdentityProvider):
    """Identity provider backed by the Clerk Backend API."""

    def __init__(
        self,
        *,
        secret_key: str,
        api_url: str = "https://api.clerk.com/v1",
        timeout_seconds: int = 10,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={"Authorization": f"Bearer {secret_key}"},
            timeout=timeout_seconds,
        )

    def authenticate(self, token: str) -> Principal:
        claims = read_session_claims(token)
        session_id = claims.get("sid")
        user_id = claims.get("sub")
        if not session_id or not user_id:
            raise AuthenticationError("Session token is missing sid/sub claims")

        session = self._request("GET", f"/sessions/{session_id}", not_found=AuthenticationError)
        if session.get("status") != "active" or session.get("user_id") != user_id:
            raise AuthenticationError("Session is not active")
        return Principal(user_id=str(user_id), session_id=str(session_id))

    def get_user(self, user_id: str) -> UserAccount:
        user = self._request("GET", f"/users/{user_id}")
        metadata = user.get("public_metadata")
        return UserAccount(
            user_id=user_id,
            primary_email=self._primary_email(user),
            metadata=metadata if isinstance(metadata, dict) else {},
        )

    def update_metadata(self, user_id: str, patch: dict[str, Any]) -> None:
        self._request("PATCH", f"/users/{user_id}/metadata", payload={"public_metadata": patch})

    @staticmethod
    def _primary_email(user: dict[str, Any]) -> str:
        addresses = user.get("email_addresses") or []
        primary_id = user.get("primary_email_address_id")
        for address in addresses:
            if address.get("id") == primary_id:
                return str(address.get("email_address", ""))
        if addresses:
            return str(addresses[0].get("email_address", ""))
        return ""

    def _request(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | None = None,
        not_found: type[Exception] = IdentityProviderError,
    ) -> dict[str, Any]:
        try:
            response = self._client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            raise IdentityProviderError(f"Clerk API unreachable: {exc}") from exc

        if response.status_code in (401, 403, 404):
            Log.debug(f"Clerk {method} {path} returned {response.status_code}")
            raise not_found(f"Clerk {method} {path} returned {response.status_code}")
        if response.is_error:
            raise IdentityProviderError(
                f"Clerk {method} {path} failed with HTTP {response.status_code}"
            )
        body = response.json()
        return body if isinstance(body, dict) else {}
