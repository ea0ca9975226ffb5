"""Subscription tiers and their monthly upload limits."""

UNLIMITED = -1

TIER_UPLOAD_LIMITS: dict[str, int] = {
    "free": 1,
    "starter": 5,
    "growth": 20,
    "pro": UNLIMITED,
}
VALID_TIERS: tuple[str, ...] = tuple(TIER_UPLOAD_LIMITS)
DEFAULT_TIER = "free"

_NEXT_TIER = {"free": "starter", "starter": "growth", "growth": "pro"}
_UPGRADE_MESSAGES = {
    "free": "Upgrade to Starter for 5 analyses/month and full features",
    "starter": "Upgrade to Growth for 20 analyses/month and team features",
    "growth": "Upgrade to Pro for unlimited analyses and premium support",
}


def normalize_tier(tier: object) -> str:
    """Known tier name, or ``free`` for anything unrecognized."""
    value = str(tier or "").lower()
    return value if value in TIER_UPLOAD_LIMITS else DEFAULT_TIER


def upload_limit(tier: str) -> int:
    return TIER_UPLOAD_LIMITS[normalize_tier(tier)]


def can_upload(tier: str, uploads_used: int) -> bool:
    limit = upload_limit(tier)
    return limit == UNLIMITED or uploads_used < limit


def next_tier(tier: str) -> str | None:
    return _NEXT_TIER.get(normalize_tier(tier))


def upgrade_message(tier: str) -> str | None:
    return _UPGRADE_MESSAGES.get(normalize_tier(tier))
