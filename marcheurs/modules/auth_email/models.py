# Supabase Auth "Send Email" hook -> POST /api/v1/hooks/auth-email
# No table of its own: Supabase Auth hands over the email it would have sent
# and this module renders it with the club's branding.

"""
Hook payload:
- user: object - the auth user, only user.email is used
- email_data: object
  - token: text - one-time code (short) or link token
  - token_hash: text - hashed token expected by /auth/v1/verify
  - redirect_to: text (nullable) - where the browser lands after verification
  - email_action_type: text - magiclink, signup, recovery, email_change, invite

The verify link points to Supabase Auth itself:
{SUPABASE_URL}/auth/v1/verify?token=<token_hash>&type=<action>&redirect_to=<url>
"""
