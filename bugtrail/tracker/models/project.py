# ============================================
# tracker/models/project.py
# ============================================
from django.db import models


class Project(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    author_id = models.CharField(max_length=64, db_index=True)
    assignees = models.JSONField(default=list)  # Ordered list of user IDs
    attachments = models.JSONField(default=list)  # [{fileName, filePath}, ...]
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'projects'
        ordering = ['-created_at']

    def __str__(self):
        return self.title
