from django.contrib import admin

from tracker.models import Project, Ticket, TicketType


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "author_id", "created_at")
    search_fields = ("title", "description")


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "project_id", "type", "status", "created_by", "created_on", "updated_on")
    list_filter = ("status", "type", "estimated_time_unit")
    search_fields = ("title", "description")


@admin.register(TicketType)
class TicketTypeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "color")
