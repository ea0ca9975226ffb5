from abc import ABC, abstractmethod
from typing import Any

from complyscan.accounts.models import Principal, UserAccount


class BaseIdentityProvider(ABC):
    """Contract for the identity provider that owns users and their metadata."""

    @abstractmethod
    def authenticate(self, token: str) -> Principal:
        """Resolve a bearer session token to a principal.

        Raises:
            AuthenticationError: if the token is malformed or the session is not active.
            IdentityProviderError: if the provider cannot be reached.
        """

    @abstractmethod
    def get_user(self, user_id: str) -> UserAccount:
        """Fetch the user with their primary email and public metadata."""

    @abstractmethod
    def update_metadata(self, user_id: str, patch: dict[str, Any]) -> None:
        """Deep-merge ``patch`` into the user's public metadata.

        A key set to None is removed.
        """
