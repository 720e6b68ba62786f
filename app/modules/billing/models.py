# Supabase tables: subscription_prices, plan_permissions
# RPC: upgrade_user_plan
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

subscription_prices:
- id: text (primary key) - "{tier}_{cycle}", e.g. "basic_monthly"
- tier: text (not null) - basic | pro
- cycle: text (not null) - monthly | annual
- amount: numeric (not null) - major currency units
- updated_at: timestamp (nullable)

plan_permissions:
- tier: text (primary key) - free | basic | pro
- course_lesson_limit: integer (not null) - -1 for unlimited
- allow_ai_tutor: boolean (default: false)
- allow_live_instructor: boolean (default: false)

upgrade_user_plan(target_user_id uuid, new_plan text, duration_days int,
                  payment_ref text, payment_amount int):
- sets profiles.subscription_plan / is_pro / subscription_end_date
- records the payment (amount in minor units)
"""
