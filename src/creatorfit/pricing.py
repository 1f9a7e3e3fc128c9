"""Sponsorship pricing and estimated media value (EMV)."""

from __future__ import annotations

import logging
import math

from creatorfit.models import (
    ExclusivityTier,
    Platform,
    PricingConfiguration,
    Profile,
    UsageRight,
    ValuationResult,
)

logger = logging.getLogger(__name__)

# ── Premiums (fractions of the base rate) ──────────────────────────────────
USAGE_RIGHT_PREMIUMS: dict[UsageRight, float] = {
    UsageRight.BRAND_REPOST: 0.10,
    UsageRight.PAID_ADS: 0.20,
    UsageRight.WEBSITE: 0.10,
}

EXCLUSIVITY_PREMIUMS: dict[ExclusivityTier, float] = {
    ExclusivityTier.NONE: 0.0,
    ExclusivityTier.DAYS_30: 0.10,
    ExclusivityTier.DAYS_90: 0.20,
    ExclusivityTier.DAYS_180: 0.30,
    ExclusivityTier.DAYS_365: 0.50,
}

_EXTRA_DELIVERABLE_FACTOR = 0.9

# (upper bound, step) ceilings applied to the final price
_ROUNDING_TIERS: list[tuple[float, int]] = [(500, 25), (2000, 50)]
_TOP_STEP = 100

# ── EMV ────────────────────────────────────────────────────────────────────
_REACH_RATES: dict[Platform, float] = {
    Platform.YOUTUBE: 0.3,
    Platform.TIKTOK: 0.4,
}
_DEFAULT_REACH_RATE = 0.2
NONPROFIT_CPM = 5.0


def round_price(price: float) -> int:
    """Round *price* up to the next 25 / 50 / 100 depending on its tier."""
    step = _TOP_STEP
    for bound, tier_step in _ROUNDING_TIERS:
        if price < bound:
            step = tier_step
            break
    # round() first so float noise like 2800.0000000000005 stays at 2800
    return math.ceil(round(price / step, 9)) * step


def estimated_reach(profile: Profile) -> float:
    rate = _REACH_RATES.get(profile.platform, _DEFAULT_REACH_RATE)
    return profile.followers * rate * (1 + profile.engagement_rate / 5)


def price(profile: Profile, config: PricingConfiguration) -> ValuationResult:
    """Price a sponsorship for *profile* under *config*.

    Add-ons and exclusivity are each a share of the base rate; extra
    deliverables cost 90% of the single-deliverable price. A profile without
    followers or engagement is left unpriced (all zeros).
    """
    if profile.followers <= 0 or profile.engagement_rate <= 0:
        logger.info("@%s has no followers/engagement — pricing skipped", profile.handle)
        return ValuationResult()

    base_rate = math.floor(profile.followers * profile.engagement_rate / 100 + 0.5)

    total = float(base_rate)
    for right, premium in USAGE_RIGHT_PREMIUMS.items():
        if right in config.usage_rights:
            total += base_rate * premium
    total += base_rate * EXCLUSIVITY_PREMIUMS[config.exclusivity]

    if config.deliverable_count > 1:
        total += total * (config.deliverable_count - 1) * _EXTRA_DELIVERABLE_FACTOR

    reach = estimated_reach(profile)
    result = ValuationResult(
        base_rate=base_rate,
        final_price=round_price(total),
        estimated_reach=reach,
        estimated_media_value=reach * NONPROFIT_CPM / 1000,
    )
    logger.info(
        "Priced @%s: base=%d final=%d emv=%.2f",
        profile.handle, result.base_rate, result.final_price, result.estimated_media_value,
    )
    return result
