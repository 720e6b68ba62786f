from app.modules.billing.schemas import BillingCycle, PlanPermissionUpdate, PlanPrice, PlanSettings, Tier
from app.modules.billing.service import BillingService
from fakes import FakeSupabase, api_error


def _permissions():
    return [
        {"tier": "free", "course_lesson_limit": 2, "allow_ai_tutor": False, "allow_live_instructor": False},
        {"tier": "basic", "course_lesson_limit": 10, "allow_ai_tutor": True, "allow_live_instructor": False},
        {"tier": "pro", "course_lesson_limit": -1, "allow_ai_tutor": True, "allow_live_instructor": True},
    ]


def test_plan_settings_defaults_when_table_empty() -> None:
    settings = BillingService(FakeSupabase(tables={"subscription_prices": []})).fetch_plan_settings()

    assert settings.basic == PlanPrice(monthly=50, annual=499)
    assert settings.pro == PlanPrice(monthly=99, annual=929)


def test_plan_settings_rows_override_defaults() -> None:
    db = FakeSupabase(tables={"subscription_prices": [
        {"tier": "pro", "cycle": "monthly", "amount": 120},
        {"tier": "enterprise", "cycle": "monthly", "amount": 999},
        {"tier": "basic", "cycle": "annual", "amount": None},
    ]})

    settings = BillingService(db).fetch_plan_settings()

    assert settings.pro.monthly == 120
    assert settings.pro.annual == 929
    assert settings.basic.annual == 499


def test_plan_settings_defaults_on_failure() -> None:
    db = FakeSupabase(fail={"subscription_prices": api_error("500")})

    assert BillingService(db).fetch_plan_settings() == PlanSettings()


def test_save_plan_settings_upserts_every_tier_and_cycle() -> None:
    db = FakeSupabase(tables={"subscription_prices": []})
    service = BillingService(db)
    settings = PlanSettings(pro=PlanPrice(monthly=150, annual=1500))

    assert service.save_plan_settings(settings)
    assert sorted(r["id"] for r in db.tables["subscription_prices"]) == [
        "basic_annual", "basic_monthly", "pro_annual", "pro_monthly",
    ]

    assert service.fetch_plan_settings() == settings


def test_save_plan_settings_failure() -> None:
    db = FakeSupabase(fail={"subscription_prices": api_error("42501")})

    assert BillingService(db).save_plan_settings(PlanSettings()) is False


def test_permissions_accept_stored_plan_names() -> None:
    service = BillingService(FakeSupabase(tables={"plan_permissions": _permissions()}))

    assert service.fetch_plan_permissions("basic_monthly").course_lesson_limit == 10
    assert service.fetch_plan_permissions("pro").course_lesson_limit == -1
    assert service.fetch_plan_permissions("mystery").tier == "free"


def test_missing_permissions_row_is_none() -> None:
    service = BillingService(FakeSupabase(tables={"plan_permissions": []}))

    assert service.fetch_plan_permissions("pro") is None


def test_update_plan_permission_only_writes_given_fields() -> None:
    db = FakeSupabase(tables={"plan_permissions": _permissions()})
    service = BillingService(db)

    assert service.update_plan_permission("free", PlanPermissionUpdate(course_lesson_limit=3))

    free = service.fetch_plan_permissions("free")
    assert free.course_lesson_limit == 3
    assert free.allow_ai_tutor is False
    assert [p.tier for p in service.fetch_all_plan_permissions()] == ["basic", "free", "pro"]


def test_upgrade_subscription_calls_rpc() -> None:
    db = FakeSupabase()

    assert BillingService(db).upgrade_subscription("u1", Tier.PRO, BillingCycle.ANNUAL, "ref-1", 92900)

    assert db.rpc_calls == [("upgrade_user_plan", {
        "target_user_id": "u1",
        "new_plan": "pro_annual",
        "duration_days": 365,
        "payment_ref": "ref-1",
        "payment_amount": 92900,
    })]


def test_upgrade_subscription_failure() -> None:
    db = FakeSupabase(fail_rpc={"upgrade_user_plan": api_error("P0001", "no such user")})

    assert BillingService(db).upgrade_subscription("u1", Tier.BASIC, BillingCycle.MONTHLY, "r", 5000) is False
