"""
Pricing view state: billing-cycle toggle, displayed prices and the purchase path.

The payment widget is an external collaborator. The view hands it a PaymentConfig
and two callbacks; when the widget reports success the view upgrades the
subscription and tells the host which tier is now active.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, Protocol

from app.config import settings
from app.config.plans_config import FALLBACK_PAYMENT_EMAIL
from app.core.cancellation import CancellationToken
from app.modules.auth.schemas import AuthUser
from app.modules.billing.plans import derive_prices, price_for, to_minor_units
from app.modules.billing.schemas import BillingCycle, DerivedPrices, PaymentConfig, PlanSettings, Tier

logger = logging.getLogger(__name__)


class PaymentWidget(Protocol):
    def initialize(
        self,
        config: PaymentConfig,
        on_success: Callable[[str], Awaitable[bool]],
        on_close: Callable[[], None],
    ) -> None:
        ...


class SubscriptionStore(Protocol):
    def upgrade_subscription(self, user_id: str, tier: Tier, cycle: BillingCycle, reference: str, amount: int) -> bool:
        ...


def new_payment_reference() -> str:
    return str(int(time.time() * 1000))


class PricingView:
    def __init__(
        self,
        user: AuthUser,
        current_tier: Tier,
        subscriptions: SubscriptionStore,
        payment_widget: Optional[PaymentWidget] = None,
        plan_settings: Optional[PlanSettings] = None,
        on_upgrade_success: Optional[Callable[[Tier], None]] = None,
        token: Optional[CancellationToken] = None,
    ):
        self.user = user
        self.current_tier = current_tier
        self.plan_settings = plan_settings
        self.billing_cycle = BillingCycle.MONTHLY
        self._subscriptions = subscriptions
        self._payment_widget = payment_widget
        self._on_upgrade_success = on_upgrade_success
        self._token = token or CancellationToken()

    def set_billing_cycle(self, cycle: BillingCycle) -> None:
        self.billing_cycle = cycle

    @property
    def prices(self) -> DerivedPrices:
        return derive_prices(self.billing_cycle, self.plan_settings)

    def is_current(self, tier: Tier) -> bool:
        return self.current_tier == tier

    def can_purchase(self, tier: Tier) -> bool:
        return price_for(self.plan_settings, tier, self.billing_cycle) != 0

    def payment_config(self, tier: Tier) -> Optional[PaymentConfig]:
        price = price_for(self.plan_settings, tier, self.billing_cycle)
        if price == 0:
            return None
        return PaymentConfig(
            reference=new_payment_reference(),
            email=self.user.email or FALLBACK_PAYMENT_EMAIL,
            amount=to_minor_units(price),
            currency=settings.payment_currency,
            public_key=settings.payment_public_key,
        )

    def purchase(self, tier: Tier) -> Optional[PaymentConfig]:
        """Open the payment widget for a tier. Returns None (and does nothing) when the tier is not purchasable."""
        config = self.payment_config(tier)
        if config is None:
            logger.debug(f"Purchase of {tier.value} disabled: price is 0")
            return None
        if self._payment_widget is None:
            raise RuntimeError("No payment widget configured")

        cycle = self.billing_cycle
        price = price_for(self.plan_settings, tier, cycle)

        async def on_success(reference: str) -> bool:
            return await self.handle_payment_success(reference, tier, price, cycle)

        self._payment_widget.initialize(config, on_success, self.handle_close)
        return config

    def handle_close(self) -> None:
        logger.debug("Payment widget closed without payment")

    async def handle_payment_success(
        self,
        reference: str,
        tier: Tier,
        amount: Optional[float] = None,
        cycle: Optional[BillingCycle] = None,
    ) -> bool:
        """Record a completed payment. amount is in major units; defaults to the displayed price."""
        if not self.user.id:
            return False
        cycle = cycle or self.billing_cycle
        if amount is None:
            amount = price_for(self.plan_settings, tier, cycle)
        success = await asyncio.to_thread(
            self._subscriptions.upgrade_subscription,
            self.user.id,
            tier,
            cycle,
            reference,
            to_minor_units(amount),
        )
        if not success or self._token.cancelled:
            return success
        self.current_tier = tier
        if self._on_upgrade_success:
            self._on_upgrade_success(tier)
        return True

    def dispose(self) -> None:
        self._token.cancel()
