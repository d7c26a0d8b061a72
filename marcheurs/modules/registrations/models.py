# Supabase table: registrations
# Join between a member and a hike: "I'm attending".
# Schema is documented with the hikes table in marcheurs/modules/hikes/models.py.
