# views/utils.py
"""
Shared helpers for the tracker APIViews:
request identity, id parsing and drf-spectacular building blocks.
"""
from django.core.exceptions import ValidationError
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, inline_serializer
from drf_spectacular.types import OpenApiTypes
from rest_framework import serializers

from tracker.identity import Identity

# ---- Reusable error schema
ErrorSerializer = inline_serializer(
    name="Error",
    fields={"detail": serializers.CharField()}
)


def identity_of(request) -> Identity:
    return Identity.from_user(request.user)


def parse_id(value, label: str) -> int:
    """Ids are positive integers; anything else is a validation failure."""
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()) or int(text) < 1:
        raise ValidationError(f"Invalid {label} id")
    return int(text)


# ---- Param helpers

def path_id(name: str, description: str):
    return OpenApiParameter(name, OpenApiTypes.STR, OpenApiParameter.PATH, description=description)


def std_errors(extra: dict | None = None):
    """Standard error response mapping you can merge into responses=..."""
    errs = {
        400: OpenApiResponse(ErrorSerializer, description="Validation failed"),
        401: OpenApiResponse(ErrorSerializer, description="Unauthenticated"),
        403: OpenApiResponse(ErrorSerializer, description="Not authorized"),
        404: OpenApiResponse(ErrorSerializer, description="Not found"),
    }
    if extra:
        errs.update(extra)
    return errs
