# ============================================
# tracker/selectors/ticket.py
# ============================================
from typing import Dict, List, Optional
from django.db.models import Count, QuerySet
from tracker.models import Project, Ticket
from tracker.clients.user_client import UserDirectoryClient
from tracker.selectors.project import with_assignee


class TicketSelector:

    @staticmethod
    def _live_tickets() -> QuerySet:
        """Tickets whose parent project still exists"""
        return Ticket.objects.select_related('project', 'type').filter(
            project_id__in=Project.objects.values('id')
        )

    @staticmethod
    def get_ticket_by_id(ticket_id: int) -> Optional[Ticket]:
        """Get single ticket; the parent project may be gone"""
        try:
            return Ticket.objects.select_related('type').get(id=ticket_id)
        except Ticket.DoesNotExist:
            return None

    @staticmethod
    def get_tickets_by_assignee(user_id: str) -> List[Ticket]:
        return with_assignee(TicketSelector._live_tickets().order_by('-created_on'), user_id)

    @staticmethod
    def get_tickets_by_project(project_id: int) -> QuerySet:
        return TicketSelector._live_tickets().filter(project_id=project_id).order_by('-created_on')

    @staticmethod
    def get_project_stats(project: Project) -> Dict:
        """Ticket counts for a project, broken down by status and type"""
        tickets = Ticket.objects.filter(project=project)

        by_status = {value: 0 for value in Ticket.Status.values}
        for row in tickets.values('status').annotate(n=Count('id')).order_by():
            by_status[row['status']] = row['n']

        by_type = {
            row['type__name']: row['n']
            for row in tickets.values('type__name').annotate(n=Count('id')).order_by('type__name')
        }

        unassigned = sum(1 for ids in tickets.values_list('assignees', flat=True) if not ids)

        return {
            'projectId': str(project.id),
            'totalTickets': sum(by_status.values()),
            'byStatus': by_status,
            'byType': by_type,
            'unassigned': unassigned,
        }

    @staticmethod
    def enrich_tickets_with_users(tickets: List[Ticket], with_role: bool = False) -> List[Ticket]:
        """Fetch and attach creator/assignee display data to tickets"""
        user_ids = set()

        for ticket in tickets:
            user_ids.add(str(ticket.created_by))
            user_ids.update([str(uid) for uid in ticket.assignees or []])

        users_dict = UserDirectoryClient.get_users_by_ids(list(user_ids), with_role=with_role)

        for ticket in tickets:
            ticket.created_by_data = users_dict.get(str(ticket.created_by))
            ticket.assignees_data = [
                users_dict[str(uid)]
                for uid in ticket.assignees or []
                if str(uid) in users_dict
            ]

        return tickets
