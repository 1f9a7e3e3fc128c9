"""Unit tests for sponsorship pricing and EMV."""

import pytest

from creatorfit.models import (
    ExclusivityTier,
    Platform,
    PricingConfiguration,
    Profile,
    UsageRight,
)
from creatorfit.pricing import price, round_price


def _make(
    followers: int = 100_000,
    engagement_rate: float = 2.0,
    platform: Platform = Platform.INSTAGRAM,
) -> Profile:
    return Profile(
        handle="tester",
        platform=platform,
        followers=followers,
        engagement_rate=engagement_rate,
    )


class TestRoundPrice:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(499, 500), (500, 500), (2000, 2000), (2001, 2100), (1, 25), (501, 550)],
    )
    def test_tiers(self, raw: float, expected: int) -> None:
        assert round_price(raw) == expected

    def test_float_noise_does_not_bump_a_tier_step(self) -> None:
        assert round_price(2800.0000000000005) == 2800


class TestPrice:
    def test_base_rate(self) -> None:
        result = price(_make(), PricingConfiguration())
        assert result.base_rate == 2000
        assert result.final_price == 2000

    def test_paid_ads_only(self) -> None:
        cfg = PricingConfiguration(usage_rights=frozenset({UsageRight.PAID_ADS}))
        assert price(_make(), cfg).final_price == 2400

    def test_usage_and_exclusivity_are_additive(self) -> None:
        cfg = PricingConfiguration(
            usage_rights=frozenset({UsageRight.PAID_ADS}),
            exclusivity=ExclusivityTier.DAYS_90,
        )
        result = price(_make(), cfg)
        # 2000 + 400 (paid ads) + 400 (90d)
        assert result.final_price == 2800

    def test_all_add_ons(self) -> None:
        cfg = PricingConfiguration(
            usage_rights=frozenset(UsageRight),
            exclusivity=ExclusivityTier.DAYS_365,
        )
        # 2000 * (1 + 0.1 + 0.2 + 0.1 + 0.5) = 3800
        assert price(_make(), cfg).final_price == 3800

    def test_extra_deliverables_cost_ninety_percent(self) -> None:
        cfg = PricingConfiguration(deliverable_count=3)
        # 2000 + 2000 * 2 * 0.9 = 5600
        assert price(_make(), cfg).final_price == 5600

    def test_small_creator_rounds_to_25(self) -> None:
        # base 1000 * 3.3% = 33 → 50
        result = price(_make(followers=1000, engagement_rate=3.3), PricingConfiguration())
        assert result.base_rate == 33
        assert result.final_price == 50

    def test_zero_followers_is_unpriced(self) -> None:
        result = price(_make(followers=0), PricingConfiguration())
        assert result.base_rate == 0
        assert result.final_price == 0
        assert result.estimated_media_value == 0
        assert result.roi_percent == 0

    def test_zero_engagement_is_unpriced(self) -> None:
        assert price(_make(engagement_rate=0), PricingConfiguration()).final_price == 0


class TestEMV:
    def test_instagram_reach_rate(self) -> None:
        result = price(_make(), PricingConfiguration())
        # 100000 * 0.2 * (1 + 2/5) = 28000 reach; * 5/1000 = 140
        assert result.estimated_reach == pytest.approx(28_000)
        assert result.estimated_media_value == pytest.approx(140)
        assert result.roi_percent == 7

    def test_youtube_and_tiktok_reach_rates(self) -> None:
        yt = price(_make(platform=Platform.YOUTUBE), PricingConfiguration())
        tt = price(_make(platform=Platform.TIKTOK), PricingConfiguration())
        assert yt.estimated_reach == pytest.approx(100_000 * 0.3 * 1.4)
        assert tt.estimated_reach == pytest.approx(100_000 * 0.4 * 1.4)


class TestPricingConfiguration:
    def test_deliverables_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            PricingConfiguration(deliverable_count=0)
