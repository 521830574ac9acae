# Supabase table: items
# This file documents the expected database schema
# Actual operations are handled via the Store adapter in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null, on delete cascade)
- inventory_id: uuid (foreign key to inventories.id, nullable, on delete restrict)
- space_id: uuid (foreign key to spaces.id, nullable, on delete restrict)
- name: text (not null)
- quantity: integer (not null, default 1, check quantity >= 0)
- description: text (nullable)
- photo_url: text (nullable, stored but unused)
- color: text (nullable)
- price: numeric (nullable, check price >= 0)
- measures: jsonb (nullable, opaque)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
- check constraint: num_nonnulls(inventory_id, space_id) = 1
"""
