"""
Capability table for every operation the API exposes.

Roles are ranked Employee < Manager < Admin; a capability names the lowest
role allowed to use it. Routers and services ask this module instead of
comparing role strings themselves.
"""
from fastapi import Depends

from ..models.request import AccessRequest
from ..models.user import EMPLOYEE, MANAGER, ADMIN
from .current_user import Identity, get_identity
from .errors import Forbidden

ROLE_RANK = {EMPLOYEE: 0, MANAGER: 1, ADMIN: 2}

CAPABILITIES: dict[str, str] = {
    "request:create": EMPLOYEE,
    "request:list_own": EMPLOYEE,
    "request:view": EMPLOYEE,
    "request:view_any": MANAGER,
    "request:list_pending": MANAGER,
    "request:review": MANAGER,
    "software:list": EMPLOYEE,
    "software:view": EMPLOYEE,
    "software:create": ADMIN,
    "software:update": ADMIN,
    "software:delete": ADMIN,
    "user:list": ADMIN,
    "user:update_role": ADMIN,
}


def has_capability(role: str, capability: str) -> bool:
    required = CAPABILITIES[capability]
    rank = ROLE_RANK.get(role)
    if rank is None:
        return False
    return rank >= ROLE_RANK[required]


def require_capability(identity: Identity, capability: str) -> None:
    if not has_capability(identity.role, capability):
        raise Forbidden("Insufficient permissions")


def can_view_request(identity: Identity, request: AccessRequest) -> bool:
    if request.user_id == identity.user_id:
        return True
    return has_capability(identity.role, "request:view_any")


def requires(capability: str):
    """Dependency resolving the caller and checking one capability."""
    if capability not in CAPABILITIES:
        raise KeyError(capability)

    def dependency(identity: Identity = Depends(get_identity)) -> Identity:
        require_capability(identity, capability)
        return identity

    return dependency
