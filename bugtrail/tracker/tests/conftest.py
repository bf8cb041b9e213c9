import pytest
from django.core.cache import cache

from tracker.models import Project, TicketType
from tracker.tests.factories import make_user


@pytest.fixture(autouse=True)
def _isolated_media_and_cache(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path / "media")
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def author(db):
    return make_user("alice", "project_manager", "Alice", "Author")


@pytest.fixture
def member(db):
    return make_user("bob", "developer", "Bob", "Member")


@pytest.fixture
def outsider(db):
    return make_user("carol", "project_manager", "Carol", "Outsider")


@pytest.fixture
def ticket_type(db):
    return TicketType.objects.create(name="Bug", color="red")


@pytest.fixture
def project(author, member):
    return Project.objects.create(
        title="P1",
        description="first project",
        author_id=str(author.pk),
        assignees=[str(author.pk), str(member.pk)],
    )
