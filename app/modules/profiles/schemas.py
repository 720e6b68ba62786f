from enum import Enum
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.modules.billing.schemas import Tier, BillingCycle


class SettingsTab(str, Enum):
    PROFILE = "profile"
    SECURITY = "security"


class ProfileUpdate(BaseModel):
    username: Optional[str] = None


class PasswordChange(BaseModel):
    new_password: str
    confirm_password: str


class ProfileResponse(BaseModel):
    id: str
    username: str
    total_xp: int = 0
    total_completed: int = 0
    streak: int = 0
    last_active: Optional[datetime] = None
    subscription_plan: Optional[str] = "free"
    subscription_end_date: Optional[datetime] = None
    is_pro: bool = False
    is_admin: bool = False

    class Config:
        from_attributes = True


class UserStats(BaseModel):
    total_points: int = 0
    total_completed: int = 0
    streak: int = 0
    last_active: Optional[datetime] = None
    last_industry: Optional[str] = None
    last_difficulty: Optional[str] = None
    last_context: Optional[str] = None
    last_index: int = 0
    subscription_tier: Tier = Tier.FREE
    subscription_cycle: Optional[BillingCycle] = None


class UserStatsUpdate(BaseModel):
    total_points: Optional[int] = None
    total_completed: Optional[int] = None
    streak: Optional[int] = None
    last_industry: Optional[str] = None
    last_difficulty: Optional[str] = None
    last_context: Optional[str] = None
    last_index: Optional[int] = None


class LearnerPlanUpdate(BaseModel):
    plan: str


class SettingsMessage(BaseModel):
    type: str  # success | error
    text: str


class ProfileDisplay(BaseModel):
    first_name: str
    initial: str
    initials: str
    is_pro: bool
