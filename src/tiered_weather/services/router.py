"""Subscription tier to provider routing."""

from enum import StrEnum

from tiered_weather.services.registry import ProviderIdentity


class SubscriptionTier(StrEnum):
    """Subscription levels known to the weather layer."""

    FREE = "free"
    PREMIUM = "premium"
    UPGRADE = "upgrade"


TIER_PROVIDERS: dict[SubscriptionTier, ProviderIdentity] = {
    SubscriptionTier.FREE: ProviderIdentity.OPENWEATHERMAP,
    SubscriptionTier.PREMIUM: ProviderIdentity.WEATHERAPI,
    SubscriptionTier.UPGRADE: ProviderIdentity.VISUALCROSSING,
}


def route_tier(tier: SubscriptionTier | str | None) -> ProviderIdentity:
    """Map a subscription tier to the provider serving it.

    Fail-open: an absent or unrecognised tier is served as ``free``, since
    anonymous and under-provisioned callers carry no tier.
    """
    if isinstance(tier, str):
        tier = tier.strip().lower()
    try:
        resolved = SubscriptionTier(tier)
    except ValueError:
        resolved = SubscriptionTier.FREE
    return TIER_PROVIDERS[resolved]
