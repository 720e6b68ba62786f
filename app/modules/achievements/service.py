from supabase import Client
from postgrest.exceptions import APIError
from app.config.achievements_config import ACHIEVEMENTS
from app.modules.achievements.schemas import Achievement, AchievementType, UserAchievement
from app.modules.profiles.schemas import UserStats
from app.modules.progress.service import ProgressService
from typing import Iterable, List, Optional, Set
import logging

logger = logging.getLogger(__name__)

# Postgres unique_violation: achievement already unlocked
DUPLICATE_KEY_CODE = "23505"


def is_reached(achievement: Achievement, stats: UserStats, completed_courses: int) -> bool:
    if achievement.type == AchievementType.CHALLENGE:
        return stats.total_completed >= achievement.target
    if achievement.type == AchievementType.XP:
        return stats.total_points >= achievement.target
    if achievement.type == AchievementType.STREAK:
        return stats.streak >= achievement.target
    if achievement.type == AchievementType.COURSE:
        return completed_courses >= achievement.target
    return False


class AchievementService:
    def __init__(self, supabase: Client, progress: Optional[ProgressService] = None):
        self.supabase = supabase
        self.progress = progress or ProgressService(supabase)

    def fetch_user_achievements(self, user_id: str) -> List[UserAchievement]:
        try:
            result = self.supabase.table("user_achievements")\
                .select("*")\
                .eq("user_id", user_id)\
                .execute()
            return [UserAchievement(**row) for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching achievements: {e}")
            return []

    def unlock_achievement(self, user_id: str, achievement_key: str, title: str, description: str) -> bool:
        """Insert an unlock. True only for a new unlock; an existing one returns False."""
        try:
            self.supabase.table("user_achievements").insert({
                "user_id": user_id,
                "achievement_key": achievement_key,
                "title": title,
                "description": description,
            }).execute()
            return True
        except APIError as e:
            if e.code != DUPLICATE_KEY_CODE:
                logger.error(f"Error unlocking achievement {achievement_key}: {e.message}")
            return False
        except Exception as e:
            logger.error(f"Error unlocking achievement {achievement_key}: {e}")
            return False

    def check_achievements(
        self,
        stats: UserStats,
        user_id: str,
        unlocked: Optional[Iterable[str]] = None,
    ) -> List[Achievement]:
        """Unlock every catalogue achievement the stats now reach. Returns the newly unlocked ones in catalogue order."""
        if unlocked is None:
            unlocked = [a.achievement_key for a in self.fetch_user_achievements(user_id)]
        unlocked_ids: Set[str] = set(unlocked)
        completed_courses = self.progress.fetch_completed_course_count(user_id)

        new_unlocks: List[Achievement] = []
        for entry in ACHIEVEMENTS:
            achievement = Achievement(**entry)
            if achievement.id in unlocked_ids:
                continue
            if not is_reached(achievement, stats, completed_courses):
                continue
            if self.unlock_achievement(user_id, achievement.id, achievement.title, achievement.description):
                new_unlocks.append(achievement)
                unlocked_ids.add(achievement.id)

        if new_unlocks:
            logger.info(f"User {user_id} unlocked {len(new_unlocks)} achievement(s)")
        return new_unlocks
