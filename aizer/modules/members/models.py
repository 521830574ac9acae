# Supabase tables: group_members, profiles
# This file documents the expected database schema
# Actual operations are handled via the Store adapter in service.py

"""
Membership rows live in group_members (see modules/groups/models.py).

Invitation flow:
- invite: a row is inserted with role admin/member and accepted_at = null
- pending invitations of a user: rows with user_id = user and accepted_at is null
- accept: accepted_at is set to now()
- reject: the row is deleted

The group owner (groups.owner_id) never needs a row; listings synthesize one
with id "owner-<owner_id>" and role "owner".

Display data comes from profiles (see modules/profiles/models.py).
"""
