from complyscan.accounts.base import BaseIdentityProvider
from complyscan.accounts.clerk_adapter import ClerkAdapter
from complyscan.accounts.service import AccountService
from complyscan.config.settings import Settings


class AccountServiceFactory:
    """Creates the account service over the configured identity provider."""

    PROVIDERS = ("clerk",)

    @classmethod
    def create(cls, settings: Settings) -> AccountService:
        return AccountService(cls.create_provider(settings), owner_email=settings.owner_email)

    @classmethod
    def create_provider(cls, settings: Settings) -> BaseIdentityProvider:
        provider = settings.identity_provider.lower()
        if provider == "clerk":
            if not settings.clerk_secret_key:
                raise ValueError("clerk_secret_key is required for identity_provider=clerk")
            return ClerkAdapter(
                secret_key=settings.clerk_secret_key,
                api_url=settings.clerk_api_url,
                timeout_seconds=settings.clerk_timeout_seconds,
            )
        raise ValueError(
            f"Unknown identity provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
