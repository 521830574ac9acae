# Supabase tables: groups, group_members
# This file documents the expected database schema
# Actual operations are handled via the Store adapter in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- owner_id: uuid (foreign key to auth.users.id, not null) - creator/owner
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null, on delete cascade)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null, default: 'member') - values: admin, member
  (the owner is implied by groups.owner_id and needs no row)
- accepted_at: timestamp (nullable) - null while the invitation is pending
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
- unique constraint on (group_id, user_id)
"""
