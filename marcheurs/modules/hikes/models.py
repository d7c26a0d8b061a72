# Supabase table: hikes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- title: text (not null)
- date: date (nullable) - day of the outing, no time of day
- location: text (nullable)
- description: text (nullable)
- difficulty: text (nullable) - values: Facile, Moyen, Difficile
- duration: text (nullable) - free text, e.g. "4h30"
- distance: numeric (nullable) - km
- elevation: numeric (nullable) - positive elevation gain in m
- meeting_point: text (nullable)
- start_time: text (nullable) - "HH:MM"
- map_embed_code: text (nullable) - iframe snippet
- gpx_file: text (nullable) - public URL in the 'tracks' bucket
- cover_image_url: text (nullable)
- participants_count: integer (nullable)
- status: text (not null, default: 'draft') - values: draft, published, planned
  (legacy rows may still say 'Publiée')
- created_by: uuid (foreign key to profiles.id, nullable)
- created_at: timestamp (default: now())

Supabase table: registrations
- id: uuid (primary key)
- hike_id: uuid (foreign key to hikes.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- unique (hike_id, user_id)

Database webhooks on INSERT/UPDATE/DELETE of hikes call POST /api/v1/webhooks/notify.
"""
