from complyscan.accounts.models import (
    DEFAULT_PRIMARY_COLOR,
    Branding,
    Subscription,
    default_notification_settings,
)


class TestSubscription:
    def test_missing_metadata_defaults_to_free(self) -> None:
        subscription = Subscription.from_metadata({})
        assert subscription.tier == "free"
        assert subscription.uploads_used == 0
        assert subscription.can_upload

    def test_garbage_usage_is_zero(self) -> None:
        subscription = Subscription.from_metadata(
            {"subscription": {"tier": "starter", "uploadsUsed": "many"}}
        )
        assert subscription.uploads_used == 0

    def test_limit_reached(self) -> None:
        subscription = Subscription.from_metadata(
            {"subscription": {"tier": "starter", "uploadsUsed": 5}}
        )
        assert not subscription.can_upload
        assert subscription.to_dict()["canUpload"] is False
        assert subscription.to_dict()["uploadLimit"] == 5

    def test_owner_and_dev_are_unlimited(self) -> None:
        owner = Subscription.from_metadata({"subscription": {"uploadsUsed": 99}}, is_owner=True)
        dev = Subscription.from_metadata({"subscription": {"isDev": True, "uploadsUsed": 99}})
        for subscription in (owner, dev):
            assert subscription.can_upload
            assert subscription.upload_limit == -1
            assert subscription.has_pro_features
            assert subscription.to_dict()["upgradeMessage"] is None

    def test_to_dict_shape(self) -> None:
        assert Subscription(tier="growth", uploads_used=3).to_dict() == {
            "tier": "growth",
            "uploadsUsed": 3,
            "uploadLimit": 20,
            "canUpload": True,
            "isOwner": False,
            "isDev": False,
            "upgradeMessage": "Upgrade to Pro for unlimited analyses and premium support",
        }


class TestBranding:
    def test_defaults(self) -> None:
        branding = Branding.from_metadata({})
        assert branding.primary_color == DEFAULT_PRIMARY_COLOR
        assert "updatedAt" not in branding.to_dict()

    def test_reads_metadata(self) -> None:
        branding = Branding.from_metadata(
            {"branding": {"companyName": "Acme", "primaryColor": "#ff0000", "updatedAt": "t"}}
        )
        assert branding.to_dict() == {
            "companyName": "Acme",
            "logoUrl": "",
            "primaryColor": "#ff0000",
            "updatedAt": "t",
        }


def test_default_notification_settings() -> None:
    settings = default_notification_settings()
    assert settings["alerts"]["riskThreshold"] == 7
    assert settings["digest"]["frequency"] == "weekly"
    assert settings["locations"] == []
