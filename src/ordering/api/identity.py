"""Caller identity for Ordering routes.

The upstream gateway verifies the bearer credential and forwards the verified
claims as headers. Nothing here inspects tokens.
"""

from fastapi import Header

from ordering.access import Identity

SUBJECT_HEADER = "X-User-Id"
ROLES_HEADER = "X-User-Roles"


def current_identity(
    x_user_id: str | None = Header(default=None, alias=SUBJECT_HEADER),
    x_user_roles: str | None = Header(default=None, alias=ROLES_HEADER),
) -> Identity:
    """Build the caller's ``Identity`` from the forwarded claim headers."""
    roles = (x_user_roles or "").split(",")
    return Identity.from_claims(x_user_id, roles)
