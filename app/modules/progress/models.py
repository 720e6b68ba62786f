# Supabase tables: challenge_attempts, user_module_progress, xp_events, course_enrollments,
#                  learning_path_enrollments, user_certificates; view: leaderboard
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

challenge_attempts:
- id: bigint (primary key)
- user_id: uuid (foreign key to auth.users.id)
- question_id: integer
- query: text
- is_correct: boolean
- points_earned: integer
- industry, difficulty: text
- created_at: timestamp

user_module_progress:
- user_id: uuid, module_id: bigint - UNIQUE together
- course_id: bigint
- status: text - started | completed
- xp_earned: integer (nullable)
- completed_at, updated_at: timestamp (nullable)

xp_events:
- user_id: uuid
- source: text ('challenge')
- source_id: bigint
- xp: integer

course_enrollments:
- id: bigint (primary key)
- user_id: uuid, course_id: bigint
- status: text - enrolled | in_progress | completed
- enrolled_at, last_accessed, completed_at: timestamp

learning_path_enrollments:
- id: bigint (primary key)
- user_id: uuid, path_id: bigint
- status: text - in_progress | completed
- completed_at: timestamp (nullable)

user_certificates:
- id: uuid
- user_id: uuid
- course_title: text
- certificate_url: text
- issued_at: timestamp

leaderboard (view):
- username: text, total_xp: integer, global_rank: integer

Expected RPC functions:
- add_xp(user_id uuid, xp integer): increments profiles.total_xp
"""
