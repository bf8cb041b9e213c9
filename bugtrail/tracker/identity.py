# ============================================
# tracker/identity.py
# ============================================
from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, passed explicitly into every service call."""
    user_id: str
    role: str

    @classmethod
    def from_user(cls, user) -> 'Identity':
        return cls(user_id=str(user.pk), role=role_of(user))


def role_of(user) -> str:
    """
    Role name of a Django user.
    Superusers are admins, otherwise the first auth group (by name) wins.
    """
    if user.is_superuser:
        return 'admin'
    group = user.groups.order_by('name').first()
    if group is None:
        return settings.TRACKER_DEFAULT_ROLE
    return group.name.strip().lower()
