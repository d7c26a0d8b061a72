# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (synced from auth.users by the on-signup trigger)
- display_name: text (nullable)
- first_name: text (nullable)
- last_name: text (nullable)
- address: text (nullable)
- address_complement: text (nullable)
- postal_code: text (nullable)
- city: text (nullable)
- phone_mobile: text (nullable)
- phone_fixed: text (nullable)
- is_profile_completed: boolean (default: false) - set by the member through the completion form
- role: text (default: 'walker') - values: admin, editor, walker
- approved: boolean (default: false) - set by an admin; gates access to member content
- created_at: timestamp (default: now())

Database webhooks on UPDATE of this table call POST /api/v1/webhooks/notify.
"""
