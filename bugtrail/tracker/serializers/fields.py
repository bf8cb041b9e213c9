# ============================================
# tracker/serializers/fields.py
# ============================================
from rest_framework import serializers
from rest_framework.fields import empty

from tracker.services.attachment import validate_upload
from tracker.utils.normalize import Absent, normalize_ids, raw_field


class AssigneeListField(serializers.ListField):
    """
    List of user ids that tolerates every multipart encoding:
    repeated fields, one scalar, or a JSON-encoded array string.
    """
    child = serializers.CharField(max_length=64)

    def get_value(self, dictionary):
        raw = raw_field(dictionary, self.field_name)
        if isinstance(raw, Absent):
            return empty
        return raw

    def to_internal_value(self, data):
        return super().to_internal_value(normalize_ids(data))


class AttachmentField(serializers.FileField):
    """Single uploaded file restricted to the allowed MIME types"""

    def __init__(self, **kwargs):
        kwargs.setdefault('required', False)
        kwargs.setdefault('allow_null', True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        upload = super().to_internal_value(data)
        validate_upload(upload)
        return upload
