from dataclasses import dataclass, field
from typing import Any

from complyscan.accounts.tiers import UNLIMITED, normalize_tier, upgrade_message, upload_limit

DEFAULT_PRIMARY_COLOR = "#0071e3"
DEFAULT_RISK_THRESHOLD = 7


@dataclass(frozen=True)
class Principal:
    """The authenticated caller of a request."""

    user_id: str
    session_id: str = ""


@dataclass(frozen=True)
class UserAccount:
    """A user as held by the identity provider."""

    user_id: str
    primary_email: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Subscription:
    """Tier and monthly usage, stored in the identity provider's metadata."""

    tier: str = "free"
    uploads_used: int = 0
    is_owner: bool = False
    is_dev: bool = False

    @classmethod
    def from_metadata(cls, metadata: dict[str, Any], *, is_owner: bool = False) -> "Subscription":
        raw = metadata.get("subscription")
        data = raw if isinstance(raw, dict) else {}
        uploads_used = data.get("uploadsUsed")
        return cls(
            tier=normalize_tier(data.get("tier")),
            uploads_used=uploads_used if isinstance(uploads_used, int) else 0,
            is_owner=is_owner or bool(data.get("isOwner")),
            is_dev=bool(data.get("isDev")),
        )

    @property
    def upload_limit(self) -> int:
        return UNLIMITED if self.is_unlimited else upload_limit(self.tier)

    @property
    def is_unlimited(self) -> bool:
        """Pro tier, owner and dev accounts bypass upload limits."""
        return self.is_owner or self.is_dev or upload_limit(self.tier) == UNLIMITED

    @property
    def has_pro_features(self) -> bool:
        return self.tier == "pro" or self.is_owner or self.is_dev

    @property
    def can_upload(self) -> bool:
        return self.is_unlimited or self.uploads_used < upload_limit(self.tier)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier": self.tier,
            "uploadsUsed": self.uploads_used,
            "uploadLimit": self.upload_limit,
            "canUpload": self.can_upload,
            "isOwner": self.is_owner,
            "isDev": self.is_dev,
            "upgradeMessage": None if self.is_unlimited else upgrade_message(self.tier),
        }


@dataclass(frozen=True)
class Branding:
    """Report branding for pro accounts."""

    company_name: str = ""
    logo_url: str = ""
    primary_color: str = DEFAULT_PRIMARY_COLOR
    updated_at: str = ""

    @classmethod
    def from_metadata(cls, metadata: dict[str, Any]) -> "Branding":
        raw = metadata.get("branding")
        data = raw if isinstance(raw, dict) else {}
        return cls(
            company_name=data.get("companyName") or "",
            logo_url=data.get("logoUrl") or "",
            primary_color=data.get("primaryColor") or DEFAULT_PRIMARY_COLOR,
            updated_at=data.get("updatedAt") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        data = {
            "companyName": self.company_name,
            "logoUrl": self.logo_url,
            "primaryColor": self.primary_color,
        }
        if self.updated_at:
            data["updatedAt"] = self.updated_at
        return data


def default_notification_settings() -> dict[str, Any]:
    return {
        "digest": {"enabled": False, "frequency": "weekly", "email": ""},
        "alerts": {
            "enabled": False,
            "email": True,
            "riskThreshold": DEFAULT_RISK_THRESHOLD,
            "regulatoryChanges": True,
        },
        "locations": [],
    }
