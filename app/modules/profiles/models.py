# Supabase table: profiles
# RPC: handle_new_login
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- username: text (not null)
- total_xp: integer (default: 0)
- total_completed: integer (default: 0)
- streak: integer (default: 0)
- last_active: timestamp (not null)
- last_industry: text (nullable)
- last_difficulty: text (nullable) - Beginner | Intermediate
- last_context: text (nullable) - free-text context of a personalised track
- last_index: integer (default: 0)
- subscription_plan: text (default: 'free') - free | basic_monthly | basic_annual | pro_monthly | pro_annual
- subscription_end_date: timestamp (nullable)
- is_pro: boolean (default: false)
- is_admin: boolean (default: false)

handle_new_login(target_user_id uuid):
- updates streak and last_active for the day of the call

A profile row is created lazily on first login (ProfileService.ensure_profile).
"""
