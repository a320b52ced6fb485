# Supabase tables: tool_ratings, tool_comments
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

tool_ratings:
- id: uuid (primary key)
- tool_id: uuid (foreign key to ai_tools.id, ON DELETE CASCADE, not null)
- user_id: uuid (foreign key to profiles.id, ON DELETE CASCADE, not null)
- rating: integer (not null, CHECK 1 <= rating <= 5)
- created_at / updated_at: timestamp
- UNIQUE (tool_id, user_id) - upsert target

tool_comments:
- id: uuid (primary key)
- tool_id: uuid (foreign key to ai_tools.id, ON DELETE CASCADE, not null)
- user_id: uuid (foreign key to profiles.id, ON DELETE CASCADE, not null)
- content: text (not null)
- created_at / updated_at: timestamp

Row-level security (both tables):
- SELECT: rows whose tool is approved
- INSERT / UPDATE: auth.uid() = user_id
- DELETE: auth.uid() = user_id; tool_comments also lets owners delete any row
"""
