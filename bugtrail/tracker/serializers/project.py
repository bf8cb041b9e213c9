# ============================================
# tracker/serializers/project.py
# ============================================
from rest_framework import serializers
from tracker.models import Project
from tracker.serializers.fields import AssigneeListField, AttachmentField


class ProjectCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    assignees = AssigneeListField(allow_empty=False)
    attachment = AttachmentField()


class ProjectUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    assignees = AssigneeListField(required=False, allow_empty=False)
    attachment = AttachmentField()


class ProjectAttachmentSerializer(serializers.Serializer):
    attachment = AttachmentField(required=True, allow_null=False)


class AttachmentRecordSerializer(serializers.Serializer):
    fileName = serializers.CharField()
    filePath = serializers.CharField()


class ProjectOutputSerializer(serializers.ModelSerializer):
    _id = serializers.CharField(source='id', read_only=True)
    authorId = serializers.SerializerMethodField()
    assignees = serializers.SerializerMethodField()
    attachments = AttachmentRecordSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Project
        fields = [
            '_id', 'title', 'description', 'authorId',
            'assignees', 'attachments', 'createdAt', 'updatedAt'
        ]

    def get_authorId(self, obj):
        return getattr(obj, 'author_data', None) or {'_id': str(obj.author_id)}

    def get_assignees(self, obj):
        return getattr(obj, 'assignees_data', [])


class ProjectStatsSerializer(serializers.Serializer):
    projectId = serializers.CharField()
    totalTickets = serializers.IntegerField()
    byStatus = serializers.DictField(child=serializers.IntegerField())
    byType = serializers.DictField(child=serializers.IntegerField())
    unassigned = serializers.IntegerField()
