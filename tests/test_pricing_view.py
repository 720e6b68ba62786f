import pytest

from app.modules.auth.schemas import AuthUser
from app.modules.billing.pricing_view import PricingView
from app.modules.billing.schemas import BillingCycle, PlanPrice, PlanSettings, Tier


class _Subscriptions:
    def __init__(self, ok=True):
        self.ok = ok
        self.calls = []

    def upgrade_subscription(self, user_id, tier, cycle, reference, amount):
        self.calls.append((user_id, tier, cycle, reference, amount))
        return self.ok


class _Widget:
    def __init__(self):
        self.opened = []

    def initialize(self, config, on_success, on_close):
        self.opened.append((config, on_success, on_close))


USER = AuthUser(id="u1", username="ada", email="ada@example.com")


def test_billing_cycle_defaults_to_monthly_and_toggles() -> None:
    view = PricingView(USER, Tier.FREE, _Subscriptions())
    assert view.prices.cycle == BillingCycle.MONTHLY

    view.set_billing_cycle(BillingCycle.ANNUAL)

    assert (view.prices.basic, view.prices.pro) == (499, 929)


def test_payment_config_uses_minor_units_and_settings() -> None:
    view = PricingView(USER, Tier.FREE, _Subscriptions())
    view.set_billing_cycle(BillingCycle.ANNUAL)

    config = view.payment_config(Tier.PRO)

    assert config.amount == 92900
    assert config.email == "ada@example.com"
    assert config.currency == "GHS"
    assert config.reference.isdigit()


def test_payment_email_falls_back_when_user_has_none() -> None:
    view = PricingView(AuthUser(id="u1", username="ada"), Tier.FREE, _Subscriptions())

    assert view.payment_config(Tier.BASIC).email == "customer@example.com"


def test_zero_price_purchase_does_not_open_widget() -> None:
    widget = _Widget()
    plan_settings = PlanSettings(pro=PlanPrice(monthly=0, annual=0))
    view = PricingView(USER, Tier.FREE, _Subscriptions(), payment_widget=widget, plan_settings=plan_settings)

    assert view.can_purchase(Tier.PRO) is False
    assert view.purchase(Tier.PRO) is None
    assert widget.opened == []


@pytest.mark.asyncio
async def test_payment_success_upgrades_with_cycle_chosen_at_purchase() -> None:
    subscriptions = _Subscriptions()
    widget = _Widget()
    upgraded = []
    view = PricingView(USER, Tier.FREE, subscriptions, payment_widget=widget, on_upgrade_success=upgraded.append)
    view.set_billing_cycle(BillingCycle.ANNUAL)
    view.purchase(Tier.BASIC)
    view.set_billing_cycle(BillingCycle.MONTHLY)

    _config, on_success, _on_close = widget.opened[0]
    assert await on_success("ref-1") is True

    assert subscriptions.calls == [("u1", Tier.BASIC, BillingCycle.ANNUAL, "ref-1", 49900)]
    assert view.current_tier == Tier.BASIC
    assert upgraded == [Tier.BASIC]
    assert view.is_current(Tier.BASIC)


@pytest.mark.asyncio
async def test_failed_upgrade_keeps_current_tier() -> None:
    upgraded = []
    view = PricingView(USER, Tier.FREE, _Subscriptions(ok=False), on_upgrade_success=upgraded.append)

    assert await view.handle_payment_success("ref-2", Tier.PRO) is False
    assert view.current_tier == Tier.FREE
    assert upgraded == []


@pytest.mark.asyncio
async def test_disposed_view_does_not_notify_host() -> None:
    upgraded = []
    view = PricingView(USER, Tier.FREE, _Subscriptions(), on_upgrade_success=upgraded.append)
    view.dispose()

    await view.handle_payment_success("ref-3", Tier.PRO)

    assert upgraded == []
    assert view.current_tier == Tier.FREE


def test_purchase_without_widget_raises() -> None:
    view = PricingView(USER, Tier.FREE, _Subscriptions())

    with pytest.raises(RuntimeError):
        view.purchase(Tier.PRO)
