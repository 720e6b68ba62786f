"""
Plan names and price derivation.

Stored plan names look like "basic_monthly" or "pro_annual"; older rows may hold
a bare tier ("pro") or "free". parse_plan turns any of these into an explicit
(tier, cycle) pair instead of slicing strings at the call site.
"""

from typing import NamedTuple, Optional

from app.config.plans_config import PLAN_DURATION_DAYS, MINOR_UNITS_PER_MAJOR
from app.modules.billing.schemas import Tier, BillingCycle, PlanSettings, DerivedPrices


class PlanSelection(NamedTuple):
    tier: Tier
    cycle: Optional[BillingCycle]

    @property
    def plan_name(self) -> str:
        if self.cycle is None:
            return self.tier.value
        return f"{self.tier.value}_{self.cycle.value}"


def parse_plan(plan: Optional[str]) -> PlanSelection:
    """Parse a stored plan name. Anything unrecognised is the free tier with no cycle."""
    if not plan:
        return PlanSelection(Tier.FREE, None)
    parts = plan.strip().lower().split("_")
    try:
        tier = Tier(parts[0])
    except ValueError:
        return PlanSelection(Tier.FREE, None)
    cycle = None
    if len(parts) == 2:
        try:
            cycle = BillingCycle(parts[1])
        except ValueError:
            cycle = None
    elif len(parts) > 2:
        return PlanSelection(Tier.FREE, None)
    if tier is Tier.FREE:
        cycle = None
    return PlanSelection(tier, cycle)


def plan_duration_days(cycle: BillingCycle) -> int:
    return PLAN_DURATION_DAYS[cycle.value]


def to_minor_units(amount: float) -> int:
    return int(round(amount * MINOR_UNITS_PER_MAJOR))


def price_for(plan_settings: Optional[PlanSettings], tier: Tier, cycle: BillingCycle) -> float:
    if tier is Tier.FREE:
        return 0
    plan_settings = plan_settings or PlanSettings()
    tier_prices = getattr(plan_settings, tier.value, None) or getattr(PlanSettings(), tier.value)
    return getattr(tier_prices, cycle.value)


def derive_prices(cycle: BillingCycle, plan_settings: Optional[PlanSettings] = None) -> DerivedPrices:
    """Displayed price per paid tier for the selected billing cycle. A price of 0 is not purchasable."""
    basic = price_for(plan_settings, Tier.BASIC, cycle)
    pro = price_for(plan_settings, Tier.PRO, cycle)
    return DerivedPrices(
        cycle=cycle,
        basic=basic,
        pro=pro,
        basic_purchasable=basic != 0,
        pro_purchasable=pro != 0,
    )
