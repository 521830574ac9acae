# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via the Store adapter in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (nullable) - synced from auth.users, used for invitations
- display_name: text (nullable)
- accent_color: text (nullable) - hex color, e.g. "#FFFFFF"
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

A user without a row gets a default profile: display name from the local
part of the email, accent color "#FFFFFF". The row is created on first save.
"""
