"""Request-scoped dependencies shared by routers."""

from uuid import UUID
from fastapi import Header


def get_organization_id(x_organization_id: UUID = Header(...)) -> UUID:
    """Caller organization, already authenticated upstream. Trusted as-is."""
    return x_organization_id
