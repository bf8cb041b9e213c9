# ============================================
# tracker/selectors/project.py
# ============================================
from typing import List, Optional
from django.db import connection
from django.db.models import QuerySet
from tracker.models import Project
from tracker.clients.user_client import UserDirectoryClient


def with_assignee(queryset: QuerySet, user_id: str) -> List:
    """Rows whose assignees list contains user_id, in queryset order"""
    user_id = str(user_id)
    if connection.features.supports_json_field_contains:
        return list(queryset.filter(assignees__contains=[user_id]))
    # SQLite has no JSON containment lookup
    return [obj for obj in queryset if user_id in [str(uid) for uid in obj.assignees or []]]


class ProjectSelector:

    @staticmethod
    def get_project_by_id(project_id: int) -> Optional[Project]:
        """Get single project by ID"""
        try:
            return Project.objects.get(id=project_id)
        except Project.DoesNotExist:
            return None

    @staticmethod
    def get_projects_by_member(user_id: str) -> List[Project]:
        """Get all projects the user is assigned to"""
        return with_assignee(Project.objects.order_by('-created_at'), user_id)

    @staticmethod
    def enrich_projects_with_users(projects: List[Project]) -> List[Project]:
        """Fetch and attach author/assignee display data to projects"""
        user_ids = set()

        for project in projects:
            user_ids.add(str(project.author_id))
            user_ids.update([str(uid) for uid in project.assignees or []])

        users_dict = UserDirectoryClient.get_users_by_ids(list(user_ids))

        for project in projects:
            project.author_data = users_dict.get(str(project.author_id))
            project.assignees_data = [
                users_dict[str(uid)]
                for uid in project.assignees or []
                if str(uid) in users_dict
            ]

        return projects
