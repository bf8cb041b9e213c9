# ============================================
# tracker/models/ticket_type.py
# ============================================
from django.db import models


class TicketType(models.Model):
    name = models.CharField(max_length=50, unique=True)
    description = models.TextField(blank=True, default='')
    color = models.CharField(max_length=20, blank=True, default='')

    class Meta:
        db_table = 'ticket_types'
        ordering = ['name']

    def __str__(self):
        return self.name
