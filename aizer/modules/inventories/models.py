# Supabase table: inventories
# This file documents the expected database schema
# Actual operations are handled via the Store adapter in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null, on delete cascade)
- name: text (not null)
- description: text (nullable)
- parent_space_id: uuid (foreign key to spaces.id, nullable, on delete restrict)
- parent_inventory_id: uuid (foreign key to inventories.id, nullable, on delete restrict)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
- check constraint: num_nonnulls(parent_space_id, parent_inventory_id) <= 1
"""
