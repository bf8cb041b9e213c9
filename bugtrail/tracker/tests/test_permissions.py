import pytest
from django.core.exceptions import PermissionDenied

from tracker.identity import Identity
from tracker.permissions import Capability, has_capability, require_capability
from tracker.services.membership import is_author, is_member
from tracker.tests.factories import make_user


def test_default_role_table():
    assert has_capability("admin", Capability.MANAGE_PROJECTS)
    assert has_capability("project_manager", Capability.MANAGE_PROJECTS)
    assert not has_capability("developer", Capability.MANAGE_PROJECTS)
    assert has_capability("developer", Capability.MANAGE_TICKETS)
    assert not has_capability("nobody", Capability.MANAGE_TICKETS)


def test_role_table_can_be_overridden(settings):
    settings.TRACKER_ROLE_CAPABILITIES = {"developer": [Capability.MANAGE_PROJECTS]}
    assert has_capability("developer", Capability.MANAGE_PROJECTS)
    assert not has_capability("admin", Capability.MANAGE_PROJECTS)


def test_require_capability_raises_for_missing_capability():
    with pytest.raises(PermissionDenied):
        require_capability(Identity(user_id="1", role="developer"), Capability.MANAGE_PROJECTS)


@pytest.mark.django_db
def test_identity_role_comes_from_group_or_default(settings):
    settings.TRACKER_DEFAULT_ROLE = "submitter"
    dev = make_user("dev", "developer")
    plain = make_user("plain")

    assert Identity.from_user(dev) == Identity(user_id=str(dev.pk), role="developer")
    assert Identity.from_user(plain).role == "submitter"


@pytest.mark.django_db
def test_membership_and_authorship(project, author, member, outsider):
    assert is_member(str(member.pk), project)
    assert is_member(author.pk, project)
    assert not is_member(str(outsider.pk), project)

    assert is_author(str(author.pk), project)
    assert not is_author(str(member.pk), project)
