from supabase import Client
from postgrest.exceptions import APIError
from app.modules.auth.schemas import AuthUser
from app.modules.billing.plans import parse_plan, plan_duration_days
from app.modules.billing.schemas import Tier
from app.modules.profiles.schemas import ProfileUpdate, UserStats, UserStatsUpdate
from typing import List, Optional
from datetime import datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)

# PostgREST: .single() matched no rows
NO_ROWS_CODE = "PGRST116"

# UserStats field -> profiles column
STATS_COLUMNS = {
    "total_points": "total_xp",
    "total_completed": "total_completed",
    "streak": "streak",
    "last_industry": "last_industry",
    "last_difficulty": "last_difficulty",
    "last_context": "last_context",
    "last_index": "last_index",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def ensure_profile(self, user: AuthUser) -> Optional[dict]:
        """Return the user's profile, creating a free-tier one with zeroed counters if absent.
        Never raises; returns None on failure."""
        if not user.id:
            return None
        try:
            try:
                result = self.supabase.table("profiles")\
                    .select("*")\
                    .eq("id", user.id)\
                    .single()\
                    .execute()
                return result.data
            except APIError as e:
                if e.code != NO_ROWS_CODE:
                    raise

            result = self.supabase.table("profiles").insert({
                "id": user.id,
                "username": user.username,
                "total_xp": 0,
                "total_completed": 0,
                "streak": 0,
                "last_active": _now(),
                "subscription_plan": "free",
                "is_pro": False,
                "is_admin": False,
            }).execute()
            logger.info(f"Created profile for user {user.id}")
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Error ensuring profile: {e}")
            return None

    def get_profile(self, user_id: str) -> Optional[dict]:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
            return result.data if result else None
        except Exception as e:
            logger.error(f"Error fetching profile: {e}")
            return None

    def is_admin(self, user_id: str) -> bool:
        profile = self.get_profile(user_id)
        return bool(profile and profile.get("is_admin"))

    def update_profile(self, user_id: str, updates: ProfileUpdate) -> bool:
        update_data = updates.model_dump(exclude_none=True)
        if not update_data:
            return True
        try:
            self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error updating profile: {e}")
            return False

    def fetch_user_stats(self, user_id: str) -> Optional[UserStats]:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching stats: {e}")
            return None

        data = result.data or {}
        plan = parse_plan(data.get("subscription_plan"))
        return UserStats(
            total_points=data.get("total_xp") or 0,
            total_completed=data.get("total_completed") or 0,
            streak=data.get("streak") or 0,
            last_active=data.get("last_active"),
            last_industry=data.get("last_industry"),
            last_difficulty=data.get("last_difficulty"),
            last_context=data.get("last_context"),
            last_index=data.get("last_index") or 0,
            subscription_tier=plan.tier,
            subscription_cycle=plan.cycle,
        )

    def update_user_stats(self, user_id: str, stats: UserStatsUpdate) -> bool:
        """Write the given counters; last_active is always refreshed."""
        update_data = {"last_active": _now()}
        for field, value in stats.model_dump(exclude_none=True).items():
            update_data[STATS_COLUMNS[field]] = value
        try:
            self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error updating stats: {e}")
            return False

    def log_daily_activity(self, user_id: str) -> bool:
        try:
            self.supabase.rpc("handle_new_login", {"target_user_id": user_id}).execute()
            return True
        except Exception as e:
            logger.error(f"Error logging daily activity: {e}")
            return False

    # --- admin ---

    def fetch_all_learners(self) -> List[dict]:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .order("last_active", desc=True)\
                .execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching learners: {e}")
            return []

    def update_learner_plan(self, user_id: str, new_plan: str) -> bool:
        """Set a learner's plan by hand. Paid plans run 30/365 days from now; free clears the end date."""
        plan = parse_plan(new_plan)
        end_date = None
        if plan.cycle is not None:
            end_date = (datetime.now(timezone.utc) + timedelta(days=plan_duration_days(plan.cycle))).isoformat()
        try:
            result = self.supabase.table("profiles")\
                .update({
                    "subscription_plan": plan.plan_name,
                    "is_pro": plan.tier == Tier.PRO,
                    "subscription_end_date": end_date,
                })\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                logger.warning("Plan update matched no rows. Check RLS policies.")
            return True
        except Exception as e:
            logger.error(f"Error updating learner plan: {e}")
            return False
