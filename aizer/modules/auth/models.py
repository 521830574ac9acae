# Supabase Auth
# This module uses Supabase's built-in authentication system (GoTrue).
# Profiles live in the public.profiles table (see modules/profiles/models.py).

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.refresh_session() - Exchange a refresh token for a new session
- auth.sign_out() - Logout users

Session lifecycle events (SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED) are
published through aizer.modules.auth.events.session_events.
"""
