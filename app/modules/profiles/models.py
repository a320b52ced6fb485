# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (unique, not null) - synced from auth.users
- full_name: text (not null, default 'User')
- role: text (CHECK in owner, backend, frontend, pm, qa, designer; default 'frontend')
- two_factor_enabled: boolean (not null, default false)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

A trigger on auth.users (handle_new_user) inserts the profile on signup,
taking full_name and role from raw_user_meta_data.

Row-level security:
- SELECT: any authenticated user
- UPDATE: auth.uid() = id
- INSERT: auth.uid() = id (trigger path)
Profiles are never deleted by the application.
"""
