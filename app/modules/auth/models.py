# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User login and session management (auth.users table)
# - JWT token generation and validation
# - Password hashing and security

"""
Supabase Auth provides:
- auth.sign_in_with_password() - First login factor
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users
- auth.admin.create_user() - Used by app/scripts/seed_users.py

The second factor is application-level: a 6-digit code issued by
TwoFactorChallengeStore (app/modules/auth/two_factor.py) for profiles with
two_factor_enabled = true. Pending challenges live in process memory and are
not persisted.
"""
