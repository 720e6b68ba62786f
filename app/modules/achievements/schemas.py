from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from enum import Enum


class AchievementType(str, Enum):
    CHALLENGE = "challenge"
    XP = "xp"
    STREAK = "streak"
    COURSE = "course"


class Achievement(BaseModel):
    id: str
    title: str
    description: str
    target: int
    type: AchievementType


class UserAchievement(BaseModel):
    user_id: str
    achievement_key: str
    title: str
    description: str
    unlocked_at: Optional[datetime] = None


class AchievementCheckResponse(BaseModel):
    unlocked: List[Achievement]
