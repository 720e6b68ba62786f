from supabase import Client
from postgrest.exceptions import APIError
from app.modules.billing.schemas import (
    Tier, BillingCycle, PlanSettings, PlanPermission, PlanPermissionUpdate
)
from app.modules.billing.plans import parse_plan, plan_duration_days
from app.config.plans_config import PAID_TIERS, BILLING_CYCLES
from typing import List, Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class BillingService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def fetch_plan_settings(self) -> PlanSettings:
        """Current prices: rows of subscription_prices laid over the static defaults."""
        settings = PlanSettings()
        try:
            result = self.supabase.table("subscription_prices")\
                .select("tier, cycle, amount")\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching subscription_prices: {e}")
            return settings

        for row in result.data or []:
            tier = row.get("tier")
            cycle = row.get("cycle")
            if tier in PAID_TIERS and cycle in BILLING_CYCLES and row.get("amount") is not None:
                setattr(getattr(settings, tier), cycle, row["amount"])
        return settings

    def save_plan_settings(self, plan_settings: PlanSettings) -> bool:
        try:
            now = datetime.now(timezone.utc).isoformat()
            rows = []
            for tier in PAID_TIERS:
                for cycle in BILLING_CYCLES:
                    rows.append({
                        "id": f"{tier}_{cycle}",
                        "tier": tier,
                        "cycle": cycle,
                        "amount": getattr(getattr(plan_settings, tier), cycle),
                        "updated_at": now,
                    })
            self.supabase.table("subscription_prices")\
                .upsert(rows, on_conflict="id")\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error saving plan settings: {e}")
            return False

    def fetch_plan_permissions(self, tier: str) -> Optional[PlanPermission]:
        """Permissions for a tier; accepts stored plan names such as 'basic_monthly'."""
        normalized = parse_plan(tier).tier.value
        try:
            result = self.supabase.table("plan_permissions")\
                .select("*")\
                .eq("tier", normalized)\
                .single()\
                .execute()
        except APIError as e:
            logger.warning(f"No permissions found for tier: {tier} (normalized: {normalized}): {e.message}")
            return None
        except Exception as e:
            logger.error(f"Error fetching plan permissions: {e}")
            return None
        if not result.data:
            return None
        return PlanPermission(**result.data)

    def fetch_all_plan_permissions(self) -> List[PlanPermission]:
        try:
            result = self.supabase.table("plan_permissions")\
                .select("*")\
                .order("tier")\
                .execute()
            return [PlanPermission(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching all plan permissions: {e}")
            return []

    def update_plan_permission(self, tier: str, updates: PlanPermissionUpdate) -> bool:
        update_data = updates.model_dump(exclude_none=True)
        if not update_data:
            return True
        try:
            self.supabase.table("plan_permissions")\
                .update(update_data)\
                .eq("tier", tier)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error updating plan permission: {e}")
            return False

    def upgrade_subscription(
        self,
        user_id: str,
        tier: Tier,
        cycle: BillingCycle,
        reference: str,
        amount: int
    ) -> bool:
        """Activate a paid plan after payment. amount is in minor units."""
        try:
            plan_name = f"{tier.value}_{cycle.value}"
            self.supabase.rpc("upgrade_user_plan", {
                "target_user_id": user_id,
                "new_plan": plan_name,
                "duration_days": plan_duration_days(cycle),
                "payment_ref": reference,
                "payment_amount": amount,
            }).execute()
            logger.info(f"Upgraded user {user_id} to {plan_name} (ref {reference})")
            return True
        except Exception as e:
            logger.error(f"Error upgrading subscription: {e}")
            return False
