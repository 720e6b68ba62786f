# Supabase table: user_achievements
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# The achievement catalogue itself is static: app/config/achievements_config.py

"""
Expected Supabase table structure:

user_achievements:
- user_id: uuid (foreign key to auth.users.id)
- achievement_key: text - id from the static catalogue
- title: text
- description: text
- unlocked_at: timestamp (default: now())
- UNIQUE (user_id, achievement_key): a second unlock fails with 23505
"""
