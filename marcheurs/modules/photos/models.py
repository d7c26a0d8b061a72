# Supabase table: photos
# Supabase Storage bucket: photos (public)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- hike_id: uuid (foreign key to hikes.id)
- user_id: uuid (foreign key to profiles.id, nullable) - uploader
- storage_path: text (not null) - object key in the photos bucket, "{hike_id}/{random}.{ext}"
- caption: text (nullable) - original file name by default
- created_at: timestamp (default: now())

A photo is two things: the storage object and this row. They are written and
removed by two separate calls, object first on upload and on delete.

Database webhooks on INSERT/DELETE of this table call POST /api/v1/webhooks/notify.
"""
