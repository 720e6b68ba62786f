"""
Plans and Pricing Configuration
Static fallback prices used when the subscription_prices table is empty or unreachable,
plus the fixed parameters of a subscription purchase.
"""

# Fallback prices in major currency units, per tier and billing cycle
DEFAULT_PLAN_SETTINGS = {
    "basic": {"monthly": 50, "annual": 499},
    "pro": {"monthly": 99, "annual": 929},
}

PAID_TIERS = ("basic", "pro")
BILLING_CYCLES = ("monthly", "annual")

# Length of a paid subscription period
PLAN_DURATION_DAYS = {
    "monthly": 30,
    "annual": 365,
}

# Payment widget amounts are in minor units (kobo / pesewas)
MINOR_UNITS_PER_MAJOR = 100

# Used when the buyer has no email on file
FALLBACK_PAYMENT_EMAIL = "customer@example.com"

# course_lesson_limit value meaning "no limit"
UNLIMITED_LESSONS = -1
