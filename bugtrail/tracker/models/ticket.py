# ============================================
# tracker/models/ticket.py
# ============================================
from django.db import models
from django.utils import timezone


class Ticket(models.Model):
    class Status(models.TextChoices):
        OPEN = 'open', 'Open'
        IN_PROGRESS = 'in_progress', 'In Progress'
        RESOLVED = 'resolved', 'Resolved'
        CLOSED = 'closed', 'Closed'

    class TimeUnit(models.TextChoices):
        HOURS = 'h', 'Hours'
        DAYS = 'd', 'Days'

    # No FK constraint: deleting a project leaves its tickets orphaned
    project = models.ForeignKey(
        'Project',
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='tickets'
    )
    type = models.ForeignKey(
        'TicketType',
        on_delete=models.PROTECT,
        related_name='tickets'
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.OPEN
    )
    assignees = models.JSONField(default=list)  # Ordered list of user IDs
    estimated_time = models.FloatField(default=0)
    estimated_time_unit = models.CharField(
        max_length=1,
        choices=TimeUnit.choices,
        default=TimeUnit.HOURS
    )
    created_by = models.CharField(max_length=64, db_index=True)
    created_on = models.DateTimeField(default=timezone.now)
    updated_on = models.DateTimeField(null=True, blank=True)
    attachments = models.JSONField(default=list)  # [{fileName, filePath}, ...]

    class Meta:
        db_table = 'tickets'
        ordering = ['-created_on']
        indexes = [
            models.Index(fields=['project', 'status'], name='tickets_project_status_idx'),
            models.Index(fields=['created_by'], name='tickets_created_by_idx'),
        ]

    def __str__(self):
        return self.title
