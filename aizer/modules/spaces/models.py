# Supabase table: spaces
# This file documents the expected database schema
# Actual operations are handled via the Store adapter in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null, on delete cascade)
- name: text (not null)
- description: text (nullable)
- photo_url: text (nullable, stored but unused)
- parent_id: uuid (foreign key to spaces.id, nullable, on delete restrict)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
