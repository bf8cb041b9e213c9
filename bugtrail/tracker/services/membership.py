# ============================================
# tracker/services/membership.py
# ============================================
from django.core.exceptions import PermissionDenied

from tracker.models import Project


def is_member(user_id: str, project: Project) -> bool:
    """Member means listed in the project's assignees"""
    return str(user_id) in [str(uid) for uid in (project.assignees or [])]


def is_author(user_id: str, project: Project) -> bool:
    return str(user_id) == str(project.author_id)


def check_project_membership(project: Project, user_id: str, message: str = "User is not a member of this project") -> None:
    """Verify user is a member of the project"""
    if not is_member(user_id, project):
        raise PermissionDenied(message)


def check_project_author(project: Project, user_id: str, message: str = "Only the project author can do this") -> None:
    if not is_author(user_id, project):
        raise PermissionDenied(message)
