"""
Roles and Capabilities Configuration
The club has three roles stored on profiles.role. Each role maps to the set of
back-office capabilities it grants; member-level access (hikes, gallery,
registrations) is decided by the access gate, not by this table.
"""

ROLE_ADMIN = "admin"
ROLE_EDITOR = "editor"
ROLE_WALKER = "walker"

# hikes:manage covers the dashboard; photos:moderate lists and deletes any photo
ROLE_CAPABILITIES = {
    ROLE_ADMIN: ["hikes:manage", "photos:moderate", "users:manage"],
    ROLE_EDITOR: ["hikes:manage", "photos:moderate"],
    ROLE_WALKER: [],
}

# Roles allowed to see draft hikes
PRIVILEGED_ROLES = {ROLE_ADMIN, ROLE_EDITOR}


def get_role_capabilities(role: str):
    """Return the capability names granted to a role (unknown roles get none)."""
    return list(ROLE_CAPABILITIES.get(role, []))


def role_has_capability(role: str, capability: str) -> bool:
    return capability in ROLE_CAPABILITIES.get(role, [])
