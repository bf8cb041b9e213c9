# ============================================
# tracker/views/project.py
# ============================================
from drf_spectacular.utils import extend_schema, OpenApiResponse
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework import status

from tracker.permissions import Capability, HasCapability
from tracker.serializers.project import (
    AttachmentRecordSerializer,
    ProjectAttachmentSerializer,
    ProjectCreateSerializer,
    ProjectOutputSerializer,
    ProjectStatsSerializer,
    ProjectUpdateSerializer,
)
from tracker.selectors.project import ProjectSelector
from tracker.services.project import ProjectService
from tracker.views.utils import identity_of, parse_id, path_id, std_errors


def _project_response(project, status_code=status.HTTP_200_OK):
    projects_with_users = ProjectSelector.enrich_projects_with_users([project])
    return Response(ProjectOutputSerializer(projects_with_users[0]).data, status=status_code)


class ProjectListCreateAPIView(APIView):
    """
    GET: List projects the current user is assigned to
    POST: Create a new project (multipart)

    Request body (POST):
    - title: string (required)
    - description: string (optional)
    - assignees: user ids (required, repeated field / JSON array / single id)
    - attachment: file (optional, png/jpeg/pdf)
    """
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {'POST': Capability.MANAGE_PROJECTS}

    @extend_schema(tags=["Project"], summary="List my projects",
                   responses={200: ProjectOutputSerializer(many=True)})
    def get(self, request):
        projects = ProjectService.list_projects(identity=identity_of(request))

        projects_with_users = ProjectSelector.enrich_projects_with_users(projects)
        serializer = ProjectOutputSerializer(projects_with_users, many=True)
        return Response(serializer.data)

    @extend_schema(tags=["Project"], summary="Create project",
                   request={'multipart/form-data': ProjectCreateSerializer},
                   responses={201: ProjectOutputSerializer, **std_errors()})
    def post(self, request):
        serializer = ProjectCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        project = ProjectService.create_project(
            identity=identity_of(request),
            attachment=data.pop('attachment', None),
            **data
        )
        return _project_response(project, status.HTTP_201_CREATED)


class ProjectDetailAPIView(APIView):
    """
    GET: Retrieve project (members only)
    PATCH: Update project (multipart; title/description/assignees are author-only)
    DELETE: Delete project (author only)

    Path params:
    - project_id: int
    """
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        'PATCH': Capability.MANAGE_PROJECTS,
        'DELETE': Capability.MANAGE_PROJECTS,
    }

    @extend_schema(tags=["Project"], summary="Project details",
                   parameters=[path_id("project_id", "Project ID")],
                   responses={200: ProjectOutputSerializer, **std_errors()})
    def get(self, request, project_id):
        project = ProjectService.get_project(
            identity=identity_of(request),
            project_id=parse_id(project_id, "project")
        )
        return _project_response(project)

    @extend_schema(tags=["Project"], summary="Update project",
                   parameters=[path_id("project_id", "Project ID")],
                   request={'multipart/form-data': ProjectUpdateSerializer},
                   responses={200: ProjectOutputSerializer, **std_errors()})
    def patch(self, request, project_id):
        project_id = parse_id(project_id, "project")

        serializer = ProjectUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        project = ProjectService.update_project(
            identity=identity_of(request),
            project_id=project_id,
            attachment=data.pop('attachment', None),
            **data
        )
        return _project_response(project)

    @extend_schema(tags=["Project"], summary="Delete project",
                   parameters=[path_id("project_id", "Project ID")],
                   responses={200: OpenApiResponse(description="Deleted"), **std_errors()})
    def delete(self, request, project_id):
        ProjectService.delete_project(
            identity=identity_of(request),
            project_id=parse_id(project_id, "project")
        )
        return Response(status=status.HTTP_200_OK)


class ProjectStatAPIView(APIView):
    """GET: Ticket statistics for a project (members only)"""

    @extend_schema(tags=["Project"], summary="Project ticket statistics",
                   parameters=[path_id("project_id", "Project ID")],
                   responses={200: ProjectStatsSerializer, **std_errors()})
    def get(self, request, project_id):
        stats = ProjectService.project_stats(
            identity=identity_of(request),
            project_id=parse_id(project_id, "project")
        )
        return Response(ProjectStatsSerializer(stats).data)


class ProjectAttachmentAPIView(APIView):
    """POST: Upload one attachment to a project (members only)"""

    @extend_schema(tags=["Project"], summary="Upload project attachment",
                   parameters=[path_id("project_id", "Project ID")],
                   request={'multipart/form-data': ProjectAttachmentSerializer},
                   responses={201: AttachmentRecordSerializer, **std_errors()})
    def post(self, request, project_id):
        project_id = parse_id(project_id, "project")

        serializer = ProjectAttachmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        project = ProjectService.add_attachment(
            identity=identity_of(request),
            project_id=project_id,
            attachment=serializer.validated_data['attachment']
        )
        return Response(AttachmentRecordSerializer(project.attachments[-1]).data, status=status.HTTP_201_CREATED)
