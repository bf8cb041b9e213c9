# ============================================
# tracker/permissions.py
# ============================================
from typing import Dict, FrozenSet

from django.conf import settings
from django.core.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

from tracker.identity import role_of


class Capability:
    MANAGE_PROJECTS = 'manage_projects'
    MANAGE_TICKETS = 'manage_tickets'
    MANAGE_USERS = 'manage_users'


DEFAULT_ROLE_CAPABILITIES: Dict[str, FrozenSet[str]] = {
    'admin': frozenset({
        Capability.MANAGE_PROJECTS,
        Capability.MANAGE_TICKETS,
        Capability.MANAGE_USERS,
    }),
    'project_manager': frozenset({
        Capability.MANAGE_PROJECTS,
        Capability.MANAGE_TICKETS,
    }),
    'developer': frozenset({Capability.MANAGE_TICKETS}),
    'submitter': frozenset({Capability.MANAGE_TICKETS}),
}


def role_capabilities() -> Dict[str, FrozenSet[str]]:
    table = getattr(settings, 'TRACKER_ROLE_CAPABILITIES', None)
    if table is None:
        return DEFAULT_ROLE_CAPABILITIES
    return {role: frozenset(caps) for role, caps in table.items()}


def has_capability(role: str, capability: str) -> bool:
    """Whether a role grants a capability. Unknown roles grant nothing."""
    return capability in role_capabilities().get(role, frozenset())


def require_capability(identity, capability: str) -> None:
    if not has_capability(identity.role, capability):
        raise PermissionDenied(f"Role '{identity.role}' cannot {capability.replace('_', ' ')}")


class HasCapability(BasePermission):
    """
    Role pre-filter run by DRF before the handler touches storage.
    Views declare `required_capabilities = {'POST': Capability..., ...}`.
    """
    message = "Your role does not allow this action"

    def has_permission(self, request, view):
        required = getattr(view, 'required_capabilities', {}).get(request.method)
        if not required:
            return True
        return bool(request.user and request.user.is_authenticated) and has_capability(role_of(request.user), required)
