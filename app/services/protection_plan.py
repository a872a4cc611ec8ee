from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from numbers import Real
from typing import Mapping

from app.core.config import settings
from app.core.errors import InvalidArgument
from app.services.pricing_config import (
    HOST_REGIONS,
    IASSURE_PRICING,
    PLAN_LABELS,
    ProtectionPlanTier,
    Region,
    RegionPricing,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlanQuote:
    tier: ProtectionPlanTier
    label: str
    price: float | Decimal


def parse_tier(value: ProtectionPlanTier | str) -> ProtectionPlanTier:
    if isinstance(value, ProtectionPlanTier):
        return value
    if isinstance(value, str):
        try:
            return ProtectionPlanTier(value.strip().lower())
        except ValueError:
            pass
    raise InvalidArgument(f"unknown protection plan tier: {value!r}")


def parse_region(value: Region | str) -> Region:
    if isinstance(value, Region):
        return value
    if isinstance(value, str):
        try:
            return Region(value.strip().lower())
        except ValueError:
            pass
    raise InvalidArgument(f"unknown pricing region: {value!r}")


def compute_plan_price(
    base_fare: float | Decimal,
    region: Region | str,
    tier: ProtectionPlanTier | str,
    pricing: Mapping[Region, RegionPricing] = IASSURE_PRICING,
) -> float | Decimal:
    """Price of an iAssure protection plan for ``base_fare``.

    Global sites use a flat percentage per tier. UK uses the first slab whose
    inclusive ``max`` covers the fare. The result is the exact product;
    rounding to currency units is left to the caller. A ``Decimal`` fare
    yields a ``Decimal`` price.
    """
    if isinstance(base_fare, Decimal):
        if not base_fare.is_finite():
            raise InvalidArgument("base fare must be a finite number")
    elif isinstance(base_fare, bool) or not isinstance(base_fare, Real):
        raise InvalidArgument("base fare must be a number")
    elif isinstance(base_fare, float) and not math.isfinite(base_fare):
        raise InvalidArgument("base fare must be a finite number")
    if base_fare < 0:
        raise InvalidArgument("base fare must not be negative")

    region = parse_region(region)
    tier = parse_tier(tier)

    table = pricing.get(region)
    if table is None:
        raise InvalidArgument(f"no pricing configured for region {region.value}")

    if table.rates is not None:
        try:
            rate = table.rates[tier]
        except KeyError:
            raise InvalidArgument(f"no {tier.value} rate configured for region {region.value}") from None
        return _apply_rate(base_fare, rate)

    for slab in table.slabs:
        if base_fare <= slab.max:
            return _apply_rate(base_fare, slab.rate_for(tier))
    # unreachable for a validated table: the last slab is unbounded
    raise InvalidArgument(f"base fare {base_fare} exceeds every {region.value} slab")


def _apply_rate(base_fare: float | Decimal, rate: float) -> float | Decimal:
    if isinstance(base_fare, Decimal):
        return base_fare * Decimal(str(rate))
    return base_fare * rate


def quote_protection_plans(
    base_fare: float | Decimal,
    region: Region | str,
    pricing: Mapping[Region, RegionPricing] = IASSURE_PRICING,
) -> list[PlanQuote]:
    return [
        PlanQuote(
            tier=tier,
            label=plan_label(tier),
            price=compute_plan_price(base_fare, region, tier, pricing=pricing),
        )
        for tier in ProtectionPlanTier
    ]


def plan_label(tier: ProtectionPlanTier | str) -> str:
    return PLAN_LABELS[parse_tier(tier)]


def region_for_host(hostname: str | None) -> Region:
    """Pricing region for a site hostname, falling back to the configured default."""

    host = (hostname or "").strip().lower().split(":", 1)[0]
    if host:
        if host in HOST_REGIONS:
            return HOST_REGIONS[host]
        for domain, region in HOST_REGIONS.items():
            if domain in host:
                return region
        logger.debug("Unknown site host %s, using default pricing region", host)
    return parse_region(settings.default_pricing_region)


__all__ = [
    "PlanQuote",
    "compute_plan_price",
    "parse_region",
    "parse_tier",
    "plan_label",
    "quote_protection_plans",
    "region_for_host",
]
