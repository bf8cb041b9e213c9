# ============================================
# tracker/services/ticket.py
# ============================================
import logging
from typing import Dict, List, Optional

from django.conf import settings
from django.core.exceptions import PermissionDenied, ValidationError
from django.core.files.uploadedfile import UploadedFile
from django.db import DatabaseError, transaction
from django.http import Http404
from django.utils import timezone

from tracker.clients.user_client import UserDirectoryClient
from tracker.identity import Identity
from tracker.models import Project, Ticket
from tracker.permissions import Capability, require_capability
from tracker.selectors.project import ProjectSelector
from tracker.selectors.ticket import TicketSelector
from tracker.services import attachment as attachments
from tracker.services.membership import check_project_membership, is_member
from tracker.utils.normalize import unique_ids

logger = logging.getLogger(__name__)

# The only fields a client can write, on create and on update.
# createdBy, projectId and attachments are never taken from the payload.
TICKET_WRITABLE_FIELDS = frozenset({
    'title',
    'type',
    'description',
    'status',
    'assignees',
    'estimated_time',
    'estimated_time_unit',
    'updated_on',
})

# Stamped by the server whatever the client sends
SERVER_STAMPED_FIELDS = frozenset({'updated_on'})


def writable(data: Dict) -> Dict:
    return {
        field: value for field, value in data.items()
        if field in TICKET_WRITABLE_FIELDS and field not in SERVER_STAMPED_FIELDS
    }


class TicketService:

    @staticmethod
    def _get_project(project_id: int) -> Project:
        project = ProjectSelector.get_project_by_id(project_id)
        if project is None:
            raise Http404("Project does not exist")
        return project

    @staticmethod
    def _clean_assignees(project: Project, assignees: List[str]) -> List[str]:
        """Dedup (first wins); every assignee must be a known project member"""
        assignees = unique_ids([str(uid) for uid in assignees or []])

        missing = UserDirectoryClient.missing_ids(assignees)
        if missing:
            raise ValidationError(f"Unknown user id(s): {', '.join(missing)}")

        outsiders = [uid for uid in assignees if not is_member(uid, project)]
        if outsiders:
            raise ValidationError(f"Not project members: {', '.join(outsiders)}")
        return assignees

    @staticmethod
    def _save(ticket: Ticket, record: Optional[Dict[str, str]]) -> None:
        try:
            ticket.save()
        except DatabaseError as exc:
            attachments.warn_orphaned(record, exc)
            raise

    @staticmethod
    def list_for_user(*, user_id: str) -> List[Ticket]:
        """Tickets assigned to a user, across projects (orphans excluded)"""
        return TicketSelector.get_tickets_by_assignee(user_id)

    @staticmethod
    def list_for_project(*, identity: Identity, project_id: int) -> List[Ticket]:
        project = TicketService._get_project(project_id)
        check_project_membership(project, identity.user_id, "Not authorized to get project tickets")
        return list(TicketSelector.get_tickets_by_project(project.id))

    @staticmethod
    def get_ticket(*, identity: Identity, ticket_id: int) -> Ticket:
        """
        Ticket visibility is its parent project's visibility, re-checked on
        every call. A vanished parent counts as not authorized.
        """
        ticket = TicketSelector.get_ticket_by_id(ticket_id)
        if ticket is None:
            raise Http404("Ticket does not exist")

        project = ProjectSelector.get_project_by_id(ticket.project_id)
        if project is None or not is_member(identity.user_id, project):
            raise PermissionDenied("Not authorized to view the ticket")

        ticket.project = project
        return ticket

    @staticmethod
    @transaction.atomic
    def create_ticket(
        *,
        identity: Identity,
        project_id: int,
        attachment: Optional[UploadedFile] = None,
        **data
    ) -> Ticket:
        """Create a ticket under a project the caller belongs to"""

        require_capability(identity, Capability.MANAGE_TICKETS)
        project = TicketService._get_project(project_id)
        check_project_membership(project, identity.user_id, "Not authorized to add tickets to a project")

        fields = writable(data)
        fields['assignees'] = TicketService._clean_assignees(project, fields.get('assignees') or [])

        ticket = Ticket(
            project=project,
            created_by=identity.user_id,
            created_on=timezone.now(),
            **fields
        )
        record = attachments.append_upload(ticket, attachment)
        TicketService._save(ticket, record)

        logger.info("[ticket] created id=%s project=%s by=%s", ticket.id, project.id, identity.user_id)
        return ticket

    @staticmethod
    @transaction.atomic
    def update_ticket(
        *,
        identity: Identity,
        project_id: int,
        ticket_id: int,
        attachment: Optional[UploadedFile] = None,
        **data
    ) -> Ticket:
        """
        Apply whitelisted fields only; anything else in the payload is
        dropped silently. updatedOn is always the server's clock.
        No version check: concurrent updates are last-write-wins.
        """

        require_capability(identity, Capability.MANAGE_TICKETS)
        project = TicketService._get_project(project_id)
        check_project_membership(project, identity.user_id, "Not authorized to update tickets of this project")

        ticket = TicketSelector.get_ticket_by_id(ticket_id)
        if ticket is None or ticket.project_id != project.id:
            raise Http404("Ticket does not exist")

        changes = writable(data)
        if 'assignees' in changes:
            changes['assignees'] = TicketService._clean_assignees(project, changes['assignees'])
        changes['updated_on'] = timezone.now()

        for field, value in changes.items():
            setattr(ticket, field, value)

        record = attachments.append_upload(ticket, attachment)
        TicketService._save(ticket, record)
        ticket.project = project

        logger.info("[ticket] updated id=%s by=%s fields=%s attachment=%s",
                    ticket.id, identity.user_id, sorted(changes), bool(record))
        return ticket

    @staticmethod
    def delete_ticket(*, identity: Identity, ticket_id: int) -> None:
        """
        Delete by id. Membership is only enforced when
        TRACKER_ENFORCE_TICKET_DELETE_MEMBERSHIP is on.
        """

        ticket = TicketSelector.get_ticket_by_id(ticket_id)
        if ticket is None:
            raise Http404("Ticket does not exist")

        if getattr(settings, 'TRACKER_ENFORCE_TICKET_DELETE_MEMBERSHIP', False):
            project = ProjectSelector.get_project_by_id(ticket.project_id)
            if project is None or not is_member(identity.user_id, project):
                raise PermissionDenied("Not authorized to delete the ticket")

        ticket.delete()
        logger.info("[ticket] deleted id=%s by=%s", ticket_id, identity.user_id)
