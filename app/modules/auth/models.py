# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration and email confirmation (auth.users table)
# - Password sign-in, OAuth sign-in and session management
# - Password reset emails and password updates
# - JWT token generation and validation

"""
Supabase Auth calls used by provider.SupabaseAuthProvider:
- auth.sign_up() - Register new users; user_metadata.username holds "{first} {last}"
- auth.sign_in_with_password() - Authenticate users
- auth.reset_password_for_email() - Send a reset link redirecting to SITE_URL
- auth.update_user() / auth.admin.update_user_by_id() - Change password or metadata
- auth.sign_in_with_oauth() - Start an OAuth sign-in (e.g. google)
- auth.get_user() - Get current user from JWT token

Application data for a user lives in the profiles table (see profiles/models.py),
bootstrapped on first successful sign-in.
"""
