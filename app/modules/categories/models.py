# Supabase table: categories
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- name: text (unique, not null)
- description: text (nullable)
- color: text (default '#3B82F6')
- created_at: timestamp (default: now())
- updated_at: timestamp (trigger-maintained)

Row-level security:
- SELECT / INSERT / UPDATE: any authenticated user
- DELETE: profiles.role = 'owner'
ai_tools.category_id references categories.id ON DELETE SET NULL.
"""
