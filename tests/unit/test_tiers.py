import pytest

from complyscan.accounts.tiers import (
    UNLIMITED,
    can_upload,
    next_tier,
    normalize_tier,
    upgrade_message,
    upload_limit,
)


class TestTiers:
    @pytest.mark.parametrize(
        ("tier", "limit"), [("free", 1), ("starter", 5), ("growth", 20), ("pro", UNLIMITED)]
    )
    def test_upload_limits(self, tier: str, limit: int) -> None:
        assert upload_limit(tier) == limit

    def test_unknown_tier_is_free(self) -> None:
        assert normalize_tier("platinum") == "free"
        assert normalize_tier(None) == "free"
        assert normalize_tier("PRO") == "pro"

    def test_can_upload_boundary(self) -> None:
        assert can_upload("starter", 4)
        assert not can_upload("starter", 5)
        assert can_upload("pro", 10_000)

    def test_upgrade_path(self) -> None:
        assert next_tier("free") == "starter"
        assert next_tier("growth") == "pro"
        assert next_tier("pro") is None
        assert upgrade_message("pro") is None
        assert "Starter" in upgrade_message("free")
