# ============================================
# tracker/urls.py
# ============================================
from django.urls import path
from tracker.views.project import (
    ProjectListCreateAPIView,
    ProjectDetailAPIView,
    ProjectStatAPIView,
    ProjectAttachmentAPIView,
)
from tracker.views.ticket import (
    UserTicketListAPIView,
    ProjectTicketAPIView,
    TicketDetailAPIView,
)

app_name = 'tracker'

urlpatterns = [
    # Projects
    path('project', ProjectListCreateAPIView.as_view(), name='project-list-create'),
    path('project/stat/<str:project_id>', ProjectStatAPIView.as_view(), name='project-stat'),
    path('project/<str:project_id>/attachment', ProjectAttachmentAPIView.as_view(), name='project-attachment'),
    path('project/<str:project_id>', ProjectDetailAPIView.as_view(), name='project-detail'),

    # Tickets
    path('ticket/user/<str:user_id>', UserTicketListAPIView.as_view(), name='ticket-user'),
    path('ticket/project/<str:project_id>', ProjectTicketAPIView.as_view(), name='ticket-project'),
    path('ticket/<str:ticket_id>', TicketDetailAPIView.as_view(), name='ticket-detail'),
]
