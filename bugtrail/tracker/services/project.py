# ============================================
# tracker/services/project.py
# ============================================
import logging
from typing import Dict, List, Optional

from django.core.exceptions import PermissionDenied, ValidationError
from django.core.files.uploadedfile import UploadedFile
from django.db import DatabaseError, transaction
from django.http import Http404

from tracker.clients.user_client import UserDirectoryClient
from tracker.identity import Identity
from tracker.models import Project
from tracker.permissions import Capability, require_capability
from tracker.selectors.project import ProjectSelector
from tracker.selectors.ticket import TicketSelector
from tracker.services import attachment as attachments
from tracker.services.membership import check_project_author, check_project_membership, is_author, is_member
from tracker.utils.normalize import unique_ids

logger = logging.getLogger(__name__)

# Identity fields only the author may change
PROJECT_AUTHOR_FIELDS = frozenset({'title', 'description', 'assignees'})


class ProjectService:

    @staticmethod
    def _get_project(project_id: int) -> Project:
        project = ProjectSelector.get_project_by_id(project_id)
        if project is None:
            raise Http404("Project does not exist")
        return project

    @staticmethod
    def _clean_assignees(assignees: List[str]) -> List[str]:
        """Dedup (first wins), require at least one, require known users"""
        assignees = unique_ids([str(uid) for uid in assignees or []])
        if not assignees:
            raise ValidationError("A project needs at least one assignee")

        missing = UserDirectoryClient.missing_ids(assignees)
        if missing:
            raise ValidationError(f"Unknown user id(s): {', '.join(missing)}")
        return assignees

    @staticmethod
    def _save(project: Project, record: Optional[Dict[str, str]]) -> None:
        try:
            project.save()
        except DatabaseError as exc:
            attachments.warn_orphaned(record, exc)
            raise

    @staticmethod
    def list_projects(*, identity: Identity) -> List[Project]:
        """Projects the caller is assigned to"""
        return ProjectSelector.get_projects_by_member(identity.user_id)

    @staticmethod
    def get_project(*, identity: Identity, project_id: int) -> Project:
        project = ProjectService._get_project(project_id)
        check_project_membership(project, identity.user_id, "Not authorized to view this project")
        return project

    @staticmethod
    @transaction.atomic
    def create_project(
        *,
        identity: Identity,
        title: str,
        assignees: List[str],
        description: str = '',
        attachment: Optional[UploadedFile] = None
    ) -> Project:
        """Create a new project authored by the caller"""

        require_capability(identity, Capability.MANAGE_PROJECTS)

        project = Project(
            title=title,
            description=description or '',
            author_id=identity.user_id,
            assignees=ProjectService._clean_assignees(assignees),
        )
        record = attachments.append_upload(project, attachment)
        ProjectService._save(project, record)

        logger.info("[project] created id=%s by=%s assignees=%s", project.id, identity.user_id, len(project.assignees))
        return project

    @staticmethod
    @transaction.atomic
    def update_project(
        *,
        identity: Identity,
        project_id: int,
        attachment: Optional[UploadedFile] = None,
        **data
    ) -> Project:
        """Update project fields and/or append an attachment"""

        require_capability(identity, Capability.MANAGE_PROJECTS)
        project = ProjectService._get_project(project_id)

        author = is_author(identity.user_id, project)
        if not (author or is_member(identity.user_id, project)):
            raise PermissionDenied("Not authorized to update this project")

        changes = {field: value for field, value in data.items() if field in PROJECT_AUTHOR_FIELDS}
        if changes and not author:
            raise PermissionDenied("Only the project author can change title, description or assignees")

        if 'assignees' in changes:
            changes['assignees'] = ProjectService._clean_assignees(changes['assignees'])

        for field, value in changes.items():
            setattr(project, field, value)

        record = attachments.append_upload(project, attachment)
        ProjectService._save(project, record)

        logger.info("[project] updated id=%s by=%s fields=%s attachment=%s",
                    project.id, identity.user_id, sorted(changes), bool(record))
        return project

    @staticmethod
    @transaction.atomic
    def add_attachment(*, identity: Identity, project_id: int, attachment: UploadedFile) -> Project:
        """Append one uploaded file to the project's attachments"""

        if attachment is None:
            raise ValidationError("No attachment uploaded")

        project = ProjectService._get_project(project_id)
        check_project_membership(project, identity.user_id, "Not authorized to add attachments to this project")

        record = attachments.append_upload(project, attachment)
        ProjectService._save(project, record)

        logger.info("[project] attachment id=%s by=%s file=%s", project.id, identity.user_id, record['fileName'])
        return project

    @staticmethod
    def delete_project(*, identity: Identity, project_id: int) -> None:
        """
        Delete project (author only).
        Tickets are not cascaded; they become unreachable orphans.
        """

        require_capability(identity, Capability.MANAGE_PROJECTS)
        project = ProjectService._get_project(project_id)
        check_project_author(project, identity.user_id, "Only the project author can delete the project")

        project.delete()
        logger.info("[project] deleted id=%s by=%s", project_id, identity.user_id)

    @staticmethod
    def project_stats(*, identity: Identity, project_id: int) -> Dict:
        project = ProjectService._get_project(project_id)
        check_project_membership(project, identity.user_id, "Not authorized to view this project")
        return TicketSelector.get_project_stats(project)
