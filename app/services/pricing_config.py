"""Static rate tables for iAssure protection-plan pricing."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class ProtectionPlanTier(str, Enum):
    BASIC = "basic"
    PREMIUM = "premium"
    ALL = "all"


class Region(str, Enum):
    GLOBAL = "global"
    UK = "uk"


PLAN_LABELS: Mapping[ProtectionPlanTier, str] = MappingProxyType(
    {
        ProtectionPlanTier.BASIC: "Basic",
        ProtectionPlanTier.PREMIUM: "Premium",
        ProtectionPlanTier.ALL: "All Included",
    }
)


@dataclass(frozen=True, slots=True)
class PricingSlab:
    """Rates for base fares up to and including ``max``."""

    max: float
    basic: float
    premium: float
    all: float

    def rate_for(self, tier: ProtectionPlanTier) -> float:
        return getattr(self, tier.value)


@dataclass(frozen=True, slots=True)
class RegionPricing:
    """Either a flat rate per tier or an ascending slab table."""

    rates: Mapping[ProtectionPlanTier, float] | None = None
    slabs: tuple[PricingSlab, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if (self.rates is None) == (not self.slabs):
            raise ValueError("RegionPricing needs exactly one of rates or slabs")
        if self.slabs:
            bounds = [slab.max for slab in self.slabs]
            if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
                raise ValueError("pricing slabs must be strictly ascending by max")
            if not math.isinf(bounds[-1]):
                raise ValueError("last pricing slab must be unbounded")


IASSURE_PRICING: Mapping[Region, RegionPricing] = MappingProxyType(
    {
        # FlightsUS and every other non-UK site
        Region.GLOBAL: RegionPricing(
            rates=MappingProxyType(
                {
                    ProtectionPlanTier.BASIC: 0.08,
                    ProtectionPlanTier.PREMIUM: 0.10,
                    ProtectionPlanTier.ALL: 0.12,
                }
            ),
        ),
        Region.UK: RegionPricing(
            slabs=(
                PricingSlab(max=650, basic=0.07, premium=0.12, all=0.22),
                PricingSlab(max=999, basic=0.06, premium=0.11, all=0.21),
                PricingSlab(max=1499, basic=0.05, premium=0.09, all=0.20),
                PricingSlab(max=math.inf, basic=0.04, premium=0.08, all=0.18),
            ),
        ),
    }
)


# Site hostnames and the pricing region their customers are quoted in.
HOST_REGIONS: Mapping[str, Region] = MappingProxyType(
    {
        "globehunters.co.uk": Region.UK,
        "globehunters.com.au": Region.GLOBAL,
        "globehunters.com": Region.GLOBAL,
    }
)


__all__ = [
    "HOST_REGIONS",
    "IASSURE_PRICING",
    "PLAN_LABELS",
    "PricingSlab",
    "ProtectionPlanTier",
    "Region",
    "RegionPricing",
]
