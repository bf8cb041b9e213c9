from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from tracker.identity import Identity

User = get_user_model()


def make_user(username, role=None, first_name="", last_name=""):
    user = User.objects.create_user(username=username, password="pass", first_name=first_name, last_name=last_name)
    if role:
        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)
    return user


def identity(user):
    return Identity.from_user(user)


def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


def png(name="shot.png"):
    return SimpleUploadedFile(name, b"\x89PNG\r\n\x1a\nfake", content_type="image/png")


def pdf(name="report.pdf"):
    return SimpleUploadedFile(name, b"%PDF-1.4 fake", content_type="application/pdf")
