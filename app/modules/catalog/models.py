# Supabase tables: courses, course_modules, saved_challenges, challenges_inventory,
#                  learning_paths, learning_path_courses
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

courses:
- id: bigint (primary key)
- title: text (not null)
- industry: text (nullable)
- target_role: text (nullable)
- skill_level: text (nullable)
- main_context: text (nullable)
- status: text (default: 'draft') - draft | outline_ready | generating | published
- created_at: timestamp (default: now())

course_modules:
- id: bigint (primary key)
- course_id: bigint (foreign key to courses.id, on delete cascade)
- sequence_order: integer (not null) - 1-based position inside the course
- title, skill_focus, task_description, expected_outcome, estimated_time: text
- challenge_json: jsonb (nullable) - generated challenge content

saved_challenges:
- id: bigint (primary key)
- title, topic, difficulty, industry: text
- challenge_json: jsonb (not null)
- is_published: boolean (default: true)
- created_at: timestamp (default: now())

challenges_inventory:
- topic, industry, difficulty: text - UNIQUE together
- challenge_json: jsonb (not null)

learning_paths:
- id: bigint (primary key)
- title, description, target_role, industry: text
- is_published: boolean (default: false)
- created_at: timestamp (default: now())

learning_path_courses:
- path_id: bigint (foreign key to learning_paths.id)
- course_id: bigint (foreign key to courses.id)
- sequence_order: integer
"""
