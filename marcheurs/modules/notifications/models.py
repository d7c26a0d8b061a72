# Supabase Database Webhooks -> POST /api/v1/webhooks/notify
# No table of its own: this module reacts to change events on profiles, hikes
# and photos and emails the right people.

"""
Webhook payload sent by Supabase for each row change:
- type: text - INSERT, UPDATE or DELETE
- table: text - profiles, hikes or photos
- schema: text - public
- record: object (null on DELETE) - row after the change
- old_record: object (null on INSERT) - row before the change

The same event may be delivered more than once. Every rule compares
old_record with record so a replayed payload never emails twice for the same
transition.

Configure one webhook per table (profiles: UPDATE; hikes: INSERT, UPDATE,
DELETE; photos: INSERT, DELETE), with the header
"Authorization: Bearer <WEBHOOK_SECRET>" when a secret is set.
"""
