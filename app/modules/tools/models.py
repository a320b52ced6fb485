# Supabase tables: ai_tools, tool_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

ai_tools:
- id: uuid (primary key)
- name: text (not null)
- description: text (not null)
- category_id: uuid (foreign key to categories.id, ON DELETE SET NULL, nullable)
- website_url / documentation_url / video_url: text (nullable)
- difficulty_level: text (CHECK in beginner, intermediate, advanced; default 'beginner')
- pricing_model: text (CHECK in free, freemium, paid, enterprise; default 'free')
- tags: text[] (default '{}')
- status: text (CHECK in pending, approved, rejected; default 'pending')
- approved_by: uuid (foreign key to profiles.id, nullable) - last moderator
- approved_at: timestamp (nullable) - last moderation time
- rejection_reason: text (nullable)
- created_by: uuid (foreign key to profiles.id)
- created_at / updated_at: timestamp

tool_roles:
- id: uuid (primary key)
- tool_id: uuid (foreign key to ai_tools.id, ON DELETE CASCADE)
- role: text (CHECK in the Role vocabulary)
- UNIQUE (tool_id, role)

Row-level security (ai_tools), same rules as app/core/policy.py:
- SELECT: status = 'approved' OR created_by = auth.uid() OR caller is owner
- INSERT: created_by = auth.uid() AND status = 'pending'
- UPDATE / DELETE: created_by = auth.uid() OR caller is owner
tool_roles: readable by all; writable by the tool's creator or an owner.
"""
