# Supabase Auth
# Members sign in without a password: Supabase Auth emails a magic link
# (rendered by the auth email hook in marcheurs.modules.auth_email) and the
# browser comes back with a session JWT.

"""
Supabase Auth provides:
- auth.sign_in_with_otp() - Send a magic link / one-time code by email
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

auth.users holds identities only. Everything the club needs to know about a
member (names, contact, role, approval) lives in public.profiles, one row per
auth user, created by a database trigger on first sign-in.
"""
