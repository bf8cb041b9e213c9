# ============================================
# tracker/views/ticket.py
# ============================================
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework import status

from tracker.permissions import Capability, HasCapability
from tracker.serializers.ticket import (
    TicketCreateSerializer,
    TicketOutputSerializer,
    TicketUpdateSerializer,
)
from tracker.selectors.ticket import TicketSelector
from tracker.services.ticket import TicketService
from tracker.views.utils import identity_of, parse_id, path_id, std_errors


def _ticket_response(ticket, status_code=status.HTTP_200_OK):
    tickets_with_users = TicketSelector.enrich_tickets_with_users([ticket])
    return Response(TicketOutputSerializer(tickets_with_users[0]).data, status=status_code)


class UserTicketListAPIView(APIView):
    """
    GET: Tickets assigned to a user, across all projects

    Path params:
    - user_id: user id
    """

    @extend_schema(tags=["Ticket"], summary="Tickets assigned to a user",
                   parameters=[path_id("user_id", "User ID")],
                   responses={200: TicketOutputSerializer(many=True), **std_errors()})
    def get(self, request, user_id):
        tickets = TicketService.list_for_user(user_id=str(parse_id(user_id, "user")))

        tickets_with_users = TicketSelector.enrich_tickets_with_users(tickets)
        return Response(TicketOutputSerializer(tickets_with_users, many=True).data)


class ProjectTicketAPIView(APIView):
    """
    GET: List tickets of a project (members only)
    POST: Create a ticket in the project (multipart)
    PATCH: Update a ticket of the project (multipart, `_id` required)

    Path params:
    - project_id: int

    Request body (POST/PATCH):
    - title, type, description, status, assignees,
      estimatedTime, estimatedTimeUnit, attachment
    Any other submitted field is ignored.
    """
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        'POST': Capability.MANAGE_TICKETS,
        'PATCH': Capability.MANAGE_TICKETS,
    }

    @extend_schema(tags=["Ticket"], summary="Project tickets",
                   parameters=[path_id("project_id", "Project ID")],
                   responses={200: TicketOutputSerializer(many=True), **std_errors()})
    def get(self, request, project_id):
        tickets = TicketService.list_for_project(
            identity=identity_of(request),
            project_id=parse_id(project_id, "project")
        )

        # Assignees carry their role name in this view
        tickets_with_users = TicketSelector.enrich_tickets_with_users(tickets, with_role=True)
        return Response(TicketOutputSerializer(tickets_with_users, many=True).data)

    @extend_schema(tags=["Ticket"], summary="Create ticket",
                   parameters=[path_id("project_id", "Project ID")],
                   request={'multipart/form-data': TicketCreateSerializer},
                   responses={201: TicketOutputSerializer, **std_errors()})
    def post(self, request, project_id):
        project_id = parse_id(project_id, "project")

        serializer = TicketCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        ticket = TicketService.create_ticket(
            identity=identity_of(request),
            project_id=project_id,
            attachment=data.pop('attachment', None),
            **data
        )
        return _ticket_response(ticket, status.HTTP_201_CREATED)

    @extend_schema(tags=["Ticket"], summary="Update ticket",
                   parameters=[path_id("project_id", "Project ID")],
                   request={'multipart/form-data': TicketUpdateSerializer},
                   responses={200: TicketOutputSerializer, **std_errors()})
    def patch(self, request, project_id):
        project_id = parse_id(project_id, "project")

        serializer = TicketUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        ticket = TicketService.update_ticket(
            identity=identity_of(request),
            project_id=project_id,
            ticket_id=data.pop('_id'),
            attachment=data.pop('attachment', None),
            **data
        )
        return _ticket_response(ticket)


class TicketDetailAPIView(APIView):
    """
    GET: Retrieve ticket (members of the parent project only)
    DELETE: Delete ticket

    Path params:
    - ticket_id: int
    """

    @extend_schema(tags=["Ticket"], summary="Ticket details",
                   parameters=[path_id("ticket_id", "Ticket ID")],
                   responses={200: TicketOutputSerializer, **std_errors()})
    def get(self, request, ticket_id):
        ticket = TicketService.get_ticket(
            identity=identity_of(request),
            ticket_id=parse_id(ticket_id, "ticket")
        )
        return _ticket_response(ticket)

    @extend_schema(tags=["Ticket"], summary="Delete ticket",
                   parameters=[path_id("ticket_id", "Ticket ID")],
                   responses={200: OpenApiResponse(description="Deleted"), **std_errors()})
    def delete(self, request, ticket_id):
        TicketService.delete_ticket(
            identity=identity_of(request),
            ticket_id=parse_id(ticket_id, "ticket")
        )
        return Response(status=status.HTTP_200_OK)
