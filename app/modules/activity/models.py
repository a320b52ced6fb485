# Supabase table: activity_logs
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default gen_random_uuid())
- user_id: uuid (foreign key to profiles.id, ON DELETE SET NULL, nullable)
- action: text (not null, CHECK in the ActivityAction vocabulary)
- resource_type: text (not null, CHECK in the ResourceType vocabulary)
- resource_id: uuid (nullable)
- details: jsonb (default '{}')
- ip_address: text (nullable)
- user_agent: text (nullable)
- created_at: timestamp (default: now())

Row-level security:
- SELECT: owners read all rows; any user reads rows where user_id = auth.uid()
- INSERT: any authenticated user
- No UPDATE / DELETE policies: the log is append-only
"""
