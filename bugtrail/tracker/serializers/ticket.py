# ============================================
# tracker/serializers/ticket.py
# ============================================
from rest_framework import serializers
from tracker.models import Ticket, TicketType
from tracker.serializers.fields import AssigneeListField, AttachmentField
from tracker.serializers.project import AttachmentRecordSerializer


class TicketCreateSerializer(serializers.Serializer):
    """
    Writable ticket fields. Anything else a client posts (createdBy,
    projectId, attachments, ...) never reaches validated_data.
    """
    title = serializers.CharField(max_length=255)
    type = serializers.PrimaryKeyRelatedField(queryset=TicketType.objects.all())
    description = serializers.CharField(required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(choices=Ticket.Status.choices, required=False)
    assignees = AssigneeListField(required=False, default=list)
    estimatedTime = serializers.FloatField(source='estimated_time', min_value=0, required=False)
    estimatedTimeUnit = serializers.ChoiceField(
        source='estimated_time_unit',
        choices=Ticket.TimeUnit.choices,
        required=False
    )
    attachment = AttachmentField()


class TicketUpdateSerializer(TicketCreateSerializer):
    """Use with partial=True; only _id is mandatory"""
    _id = serializers.IntegerField(min_value=1, required=False)

    def validate(self, attrs):
        if '_id' not in attrs:
            raise serializers.ValidationError({'_id': 'Invalid ticket id'})
        return attrs


class TicketTypeOutputSerializer(serializers.ModelSerializer):
    _id = serializers.CharField(source='id', read_only=True)

    class Meta:
        model = TicketType
        fields = ['_id', 'name', 'description', 'color']


class TicketOutputSerializer(serializers.ModelSerializer):
    _id = serializers.CharField(source='id', read_only=True)
    projectId = serializers.SerializerMethodField()
    type = TicketTypeOutputSerializer(read_only=True)
    assignees = serializers.SerializerMethodField()
    estimatedTime = serializers.FloatField(source='estimated_time', read_only=True)
    estimatedTimeUnit = serializers.CharField(source='estimated_time_unit', read_only=True)
    createdBy = serializers.SerializerMethodField()
    createdOn = serializers.DateTimeField(source='created_on', read_only=True)
    updatedOn = serializers.DateTimeField(source='updated_on', read_only=True)
    attachments = AttachmentRecordSerializer(many=True, read_only=True)

    class Meta:
        model = Ticket
        fields = [
            '_id', 'projectId', 'type', 'title', 'description', 'status',
            'assignees', 'estimatedTime', 'estimatedTimeUnit',
            'createdBy', 'createdOn', 'updatedOn', 'attachments'
        ]

    def get_projectId(self, obj):
        return {'_id': str(obj.project.id), 'title': obj.project.title}

    def get_assignees(self, obj):
        return getattr(obj, 'assignees_data', [])

    def get_createdBy(self, obj):
        return getattr(obj, 'created_by_data', None) or {'_id': str(obj.created_by)}
