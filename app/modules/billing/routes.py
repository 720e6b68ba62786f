from fastapi import APIRouter, Depends, HTTPException
from app.core.dependencies import get_billing_service, get_current_auth_user, get_profile_service
from app.modules.auth.schemas import AuthUser
from app.modules.billing.plans import PlanSelection, derive_prices, price_for, to_minor_units
from app.modules.billing.pricing_view import PricingView
from app.modules.billing.schemas import (
    BillingCycle, CheckoutRequest, DerivedPrices, PaymentConfig, PlanPermission,
    PlanSettings, Tier, UpgradeRequest, UpgradeResponse
)
from app.modules.billing.service import BillingService
from app.modules.profiles.service import ProfileService
from datetime import datetime, timezone

router = APIRouter(prefix="/billing", tags=["billing"])


def _pricing_view(user: AuthUser, service: BillingService, profiles: ProfileService) -> PricingView:
    stats = profiles.fetch_user_stats(user.id)
    current_tier = stats.subscription_tier if stats else Tier.FREE
    return PricingView(user, current_tier, service, plan_settings=service.fetch_plan_settings())


@router.get("/plans", response_model=PlanSettings)
async def get_plans(service: BillingService = Depends(get_billing_service)):
    """Current monthly and annual prices of the paid tiers"""
    return service.fetch_plan_settings()


@router.get("/prices", response_model=DerivedPrices)
async def get_prices(
    cycle: BillingCycle = BillingCycle.MONTHLY,
    service: BillingService = Depends(get_billing_service)
):
    """Displayed prices for one billing cycle"""
    return derive_prices(cycle, service.fetch_plan_settings())


@router.get("/permissions/{tier}", response_model=PlanPermission)
async def get_permissions(tier: str, service: BillingService = Depends(get_billing_service)):
    permission = service.fetch_plan_permissions(tier)
    if permission is None:
        raise HTTPException(status_code=404, detail=f"No permissions for tier: {tier}")
    return permission


@router.post("/checkout", response_model=PaymentConfig)
async def checkout(
    request: CheckoutRequest,
    user: AuthUser = Depends(get_current_auth_user),
    service: BillingService = Depends(get_billing_service),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Payment widget configuration for a tier and cycle"""
    view = _pricing_view(user, service, profiles)
    view.set_billing_cycle(request.cycle)
    config = view.payment_config(request.tier)
    if config is None:
        raise HTTPException(status_code=400, detail=f"{request.tier.value} is not purchasable")
    return config


@router.post("/upgrade", response_model=UpgradeResponse)
async def upgrade(
    request: UpgradeRequest,
    user: AuthUser = Depends(get_current_auth_user),
    service: BillingService = Depends(get_billing_service),
    profiles: ProfileService = Depends(get_profile_service)
):
    """Activate a paid plan once the payment widget has reported success"""
    view = _pricing_view(user, service, profiles)
    view.set_billing_cycle(request.cycle)
    if not view.can_purchase(request.tier):
        raise HTTPException(status_code=400, detail=f"{request.tier.value} is not purchasable")
    if not await view.handle_payment_success(request.reference, request.tier):
        raise HTTPException(status_code=500, detail="Failed to upgrade subscription")
    amount = to_minor_units(price_for(view.plan_settings, request.tier, request.cycle))
    return UpgradeResponse(
        tier=view.current_tier,
        cycle=request.cycle,
        plan=PlanSelection(request.tier, request.cycle).plan_name,
        amount=amount,
        upgraded_at=datetime.now(timezone.utc),
    )
