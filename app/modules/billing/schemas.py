from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.config.plans_config import DEFAULT_PLAN_SETTINGS


class Tier(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    ANNUAL = "annual"


class PlanPrice(BaseModel):
    monthly: float
    annual: float


class PlanSettings(BaseModel):
    basic: PlanPrice = Field(default_factory=lambda: PlanPrice(**DEFAULT_PLAN_SETTINGS["basic"]))
    pro: PlanPrice = Field(default_factory=lambda: PlanPrice(**DEFAULT_PLAN_SETTINGS["pro"]))


class DerivedPrices(BaseModel):
    cycle: BillingCycle
    basic: float
    pro: float
    basic_purchasable: bool
    pro_purchasable: bool


class PlanPermission(BaseModel):
    tier: str
    course_lesson_limit: int  # -1 for unlimited
    allow_ai_tutor: bool = False
    allow_live_instructor: bool = False


class PlanPermissionUpdate(BaseModel):
    course_lesson_limit: Optional[int] = None
    allow_ai_tutor: Optional[bool] = None
    allow_live_instructor: Optional[bool] = None


class PaymentConfig(BaseModel):
    reference: str
    email: str
    amount: int  # minor units
    currency: str
    public_key: Optional[str] = None


class CheckoutRequest(BaseModel):
    tier: Tier
    cycle: BillingCycle


class UpgradeRequest(BaseModel):
    tier: Tier
    cycle: BillingCycle
    reference: str


class UpgradeResponse(BaseModel):
    tier: Tier
    cycle: BillingCycle
    plan: str
    amount: int
    upgraded_at: datetime
