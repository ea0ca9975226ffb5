"""Account operations on top of identity-provider metadata.

Subscription usage, API keys, branding, notification settings and alert
history all live in the user's public metadata; this service is the only
place that reads or patches it.
"""

import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from complyscan.accounts.base import BaseIdentityProvider
from complyscan.accounts.exceptions import (
    AuthorizationError,
    InvalidTierError,
    QuotaExceededError,
)
from complyscan.accounts.models import (
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_RISK_THRESHOLD,
    Branding,
    Principal,
    Subscription,
    UserAccount,
    default_notification_settings,
)
from complyscan.accounts.tiers import VALID_TIERS
from complyscan.logging.logger import Log

MAX_ALERT_HISTORY = 50
API_KEY_PREFIX = "lifeos_"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AccountService:
    """Subscription, quota and per-user settings backed by the identity provider."""

    def __init__(
        self,
        provider: BaseIdentityProvider,
        *,
        owner_email: str = "",
        clock: Callable[[], str] = _utc_now,
    ) -> None:
        self._provider = provider
        self._owner_email = owner_email.strip().lower()
        self._clock = clock

    def authenticate(self, token: str) -> Principal:
        return self._provider.authenticate(token)

    def get_user(self, principal: Principal) -> UserAccount:
        return self._provider.get_user(principal.user_id)

    def is_owner(self, user: UserAccount) -> bool:
        return bool(self._owner_email) and user.primary_email.lower() == self._owner_email

    def get_subscription(self, principal: Principal) -> Subscription:
        return self._subscription(self.get_user(principal))

    def check_quota(self, principal: Principal) -> Subscription:
        """Return the subscription if another upload is allowed.

        Raises:
            QuotaExceededError: if the tier's monthly limit is used up.
        """
        subscription = self.get_subscription(principal)
        if not subscription.can_upload:
            limit = subscription.upload_limit
            raise QuotaExceededError(
                f"You've reached your {limit} analysis limit for this month. "
                "Upgrade to continue.",
                limit=limit,
            )
        return subscription

    def record_upload(self, principal: Principal) -> Subscription:
        """Count one successful upload, except for unlimited accounts."""
        user = self.get_user(principal)
        subscription = self._subscription(user)
        if subscription.is_unlimited:
            return subscription
        raw = user.metadata.get("subscription")
        current = raw if isinstance(raw, dict) else {}
        uploads_used = subscription.uploads_used + 1
        self._provider.update_metadata(
            principal.user_id,
            {"subscription": {**current, "tier": subscription.tier, "uploadsUsed": uploads_used}},
        )
        Log.info(f"User {principal.user_id} has used {uploads_used} upload(s)")
        return Subscription(
            tier=subscription.tier,
            uploads_used=uploads_used,
            is_owner=subscription.is_owner,
            is_dev=subscription.is_dev,
        )

    def set_tier(self, principal: Principal, tier: str) -> str:
        """Owner-only: change the caller's own subscription tier.

        Raises:
            InvalidTierError: for an unknown tier.
            AuthorizationError: if the caller is not the configured owner.
        """
        if tier not in VALID_TIERS:
            raise InvalidTierError("Invalid tier")
        user = self.get_user(principal)
        if not self.is_owner(user):
            raise AuthorizationError("Only the owner can modify subscriptions")
        self._provider.update_metadata(
            principal.user_id,
            {"subscription": {"tier": tier, "updatedAt": self._clock()}},
        )
        Log.info(f"Subscription tier for {principal.user_id} set to {tier}")
        return tier

    def get_api_key(self, principal: Principal) -> dict[str, Any] | None:
        api_key = self.get_user(principal).metadata.get("apiKey")
        return api_key if isinstance(api_key, dict) else None

    def generate_api_key(self, principal: Principal) -> str:
        """Issue a new API key, replacing any existing one. Pro only."""
        self._require_pro(self.get_user(principal))
        api_key = f"{API_KEY_PREFIX}{uuid.uuid4().hex}"
        self._provider.update_metadata(
            principal.user_id,
            {"apiKey": {"key": api_key, "createdAt": self._clock()}},
        )
        return api_key

    def revoke_api_key(self, principal: Principal) -> None:
        self._provider.update_metadata(principal.user_id, {"apiKey": None})

    def get_branding(self, principal: Principal) -> Branding:
        return Branding.from_metadata(self.get_user(principal).metadata)

    def save_branding(
        self,
        principal: Principal,
        *,
        company_name: str = "",
        logo_url: str = "",
        primary_color: str = "",
    ) -> Branding:
        self._require_pro(self.get_user(principal))
        branding = Branding(
            company_name=company_name or "",
            logo_url=logo_url or "",
            primary_color=primary_color or DEFAULT_PRIMARY_COLOR,
            updated_at=self._clock(),
        )
        self._provider.update_metadata(principal.user_id, {"branding": branding.to_dict()})
        return branding

    def get_settings(self, principal: Principal) -> dict[str, Any]:
        settings = self.get_user(principal).metadata.get("settings")
        return settings if isinstance(settings, dict) else default_notification_settings()

    def save_settings(
        self,
        principal: Principal,
        *,
        digest: dict[str, Any] | None = None,
        alerts: dict[str, Any] | None = None,
        locations: list[Any] | None = None,
    ) -> dict[str, Any]:
        """Replace the supplied sections; omitted sections keep their stored value."""
        current = self.get_settings(principal)
        settings = {
            "digest": digest if digest is not None else current.get("digest"),
            "alerts": alerts if alerts is not None else current.get("alerts"),
            "locations": locations if locations is not None else current.get("locations"),
            "updatedAt": self._clock(),
        }
        self._provider.update_metadata(principal.user_id, {"settings": settings})
        return settings

    def record_high_risk_alert(
        self,
        principal: Principal,
        *,
        report_id: str,
        file_name: str,
        risk_score: float,
    ) -> dict[str, Any] | None:
        """Prepend a high-risk alert to the alert history when the user's settings ask for it.

        Only pro accounts with alerts enabled and a score at or above their
        threshold get an entry. Returns the entry, or None if no alert applies.
        """
        user = self.get_user(principal)
        if not self._subscription(user).has_pro_features:
            return None
        settings = user.metadata.get("settings")
        alerts = settings.get("alerts") if isinstance(settings, dict) else None
        if not isinstance(alerts, dict) or not alerts.get("enabled"):
            return None
        threshold = alerts.get("riskThreshold") or DEFAULT_RISK_THRESHOLD
        if risk_score < threshold:
            return None

        alert = {
            "type": "high_risk",
            "sentAt": self._clock(),
            "subject": f"High Risk Detected: {risk_score}/10",
            "reportId": report_id,
            "fileName": file_name,
            "riskScore": risk_score,
        }
        history = user.metadata.get("alertHistory")
        previous = history if isinstance(history, list) else []
        self._provider.update_metadata(
            principal.user_id,
            {"alertHistory": [alert, *previous][:MAX_ALERT_HISTORY]},
        )
        Log.info(f"High-risk alert recorded for report {report_id} (score {risk_score})")
        return alert

    def record_privacy_agreement(
        self,
        principal: Principal,
        *,
        agreement_id: str,
        agreed: bool,
        agreement_date: str,
        dont_show_again: bool,
    ) -> None:
        self._provider.update_metadata(
            principal.user_id,
            {
                "privacyPolicyAgreed": agreed,
                "privacyPolicyAgreedDate": agreement_date,
                "privacyPolicyDontShowAgain": dont_show_again,
                "privacyPolicyAgreementId": agreement_id,
            },
        )

    def _subscription(self, user: UserAccount) -> Subscription:
        return Subscription.from_metadata(user.metadata, is_owner=self.is_owner(user))

    def _require_pro(self, user: UserAccount) -> None:
        if not self._subscription(user).has_pro_features:
            raise AuthorizationError("Pro subscription required")
