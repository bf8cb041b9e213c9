from datetime import timedelta

import pytest
from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from django.utils import timezone

from tracker.models import Project, Ticket, TicketType
from tracker.services.ticket import TicketService
from tracker.tests.factories import identity, png


def _create(user, project, ticket_type, **extra):
    data = {"title": "Crash on save", "type": ticket_type, "assignees": [str(user.pk)]}
    data.update(extra)
    return TicketService.create_ticket(identity=identity(user), project_id=project.id, **data)


@pytest.mark.django_db
def test_member_creates_ticket(project, member, ticket_type):
    ticket = _create(member, project, ticket_type, estimated_time=3, estimated_time_unit="d")
    ticket.refresh_from_db()

    assert ticket.created_by == str(member.pk)
    assert ticket.project_id == project.id
    assert ticket.assignees == [str(member.pk)]
    assert ticket.status == Ticket.Status.OPEN
    assert ticket.estimated_time == 3
    assert ticket.estimated_time_unit == "d"
    assert ticket.created_on is not None
    assert ticket.updated_on is None


@pytest.mark.django_db
def test_outsider_cannot_create_ticket(project, outsider, ticket_type):
    with pytest.raises(PermissionDenied):
        _create(outsider, project, ticket_type)
    assert not Ticket.objects.exists()


@pytest.mark.django_db
def test_role_without_ticket_capability_is_rejected(project, member, ticket_type, settings):
    settings.TRACKER_ROLE_CAPABILITIES = {"developer": []}
    with pytest.raises(PermissionDenied):
        _create(member, project, ticket_type)


@pytest.mark.django_db
def test_ticket_assignees_must_be_project_members(project, member, outsider, ticket_type):
    with pytest.raises(ValidationError):
        _create(member, project, ticket_type, assignees=[str(outsider.pk)])


@pytest.mark.django_db
def test_create_ignores_protected_fields(project, member, author, ticket_type):
    ticket = _create(member, project, ticket_type, created_by=str(author.pk), attachments=[{"fileName": "x"}])
    assert ticket.created_by == str(member.pk)
    assert ticket.attachments == []


@pytest.mark.django_db
def test_update_applies_whitelist_only(project, member, author, ticket_type):
    ticket = _create(member, project, ticket_type)

    updated = TicketService.update_ticket(
        identity=identity(author),
        project_id=project.id,
        ticket_id=ticket.id,
        title="Renamed",
        status=Ticket.Status.IN_PROGRESS,
        created_by=str(author.pk),
        attachments=[],
    )
    updated.refresh_from_db()

    assert updated.title == "Renamed"
    assert updated.status == Ticket.Status.IN_PROGRESS
    assert updated.created_by == str(member.pk)
    assert updated.project_id == project.id


@pytest.mark.django_db
def test_update_stamps_updated_on_with_server_time(project, member, ticket_type):
    ticket = _create(member, project, ticket_type)
    stale = timezone.now() - timedelta(days=30)

    before = timezone.now()
    updated = TicketService.update_ticket(
        identity=identity(member), project_id=project.id, ticket_id=ticket.id, updated_on=stale,
    )

    assert updated.updated_on >= before
    assert updated.updated_on >= updated.created_on


@pytest.mark.django_db
def test_update_appends_attachment_without_touching_history(project, member, ticket_type):
    ticket = _create(member, project, ticket_type, attachment=png("one.png"))
    first = list(ticket.attachments)

    updated = TicketService.update_ticket(
        identity=identity(member), project_id=project.id, ticket_id=ticket.id, attachment=png("two.png"),
    )
    updated.refresh_from_db()

    assert len(updated.attachments) == 2
    assert updated.attachments[0] == first[0]
    assert updated.attachments[1]["fileName"].endswith("-two.png")


@pytest.mark.django_db
def test_update_rejects_ticket_from_another_project(project, member, author, ticket_type):
    other = Project.objects.create(title="Other", author_id=str(author.pk), assignees=[str(author.pk), str(member.pk)])
    foreign = _create(member, other, ticket_type)

    with pytest.raises(Http404):
        TicketService.update_ticket(identity=identity(member), project_id=project.id, ticket_id=foreign.id, title="x")


@pytest.mark.django_db
def test_get_ticket_follows_parent_visibility(project, member, outsider, author, ticket_type):
    ticket = _create(member, project, ticket_type)

    assert TicketService.get_ticket(identity=identity(member), ticket_id=ticket.id).id == ticket.id
    with pytest.raises(PermissionDenied):
        TicketService.get_ticket(identity=identity(outsider), ticket_id=ticket.id)

    # Membership is re-read on each call
    project.assignees = [str(author.pk)]
    project.save()
    with pytest.raises(PermissionDenied):
        TicketService.get_ticket(identity=identity(member), ticket_id=ticket.id)


@pytest.mark.django_db
def test_get_ticket_missing_vs_orphaned(project, author, ticket_type):
    ticket = _create(author, project, ticket_type)

    with pytest.raises(Http404):
        TicketService.get_ticket(identity=identity(author), ticket_id=ticket.id + 100)

    project.delete()
    with pytest.raises(PermissionDenied):
        TicketService.get_ticket(identity=identity(author), ticket_id=ticket.id)


@pytest.mark.django_db
def test_list_for_project_requires_membership(project, member, outsider, ticket_type):
    _create(member, project, ticket_type)

    assert len(TicketService.list_for_project(identity=identity(member), project_id=project.id)) == 1
    with pytest.raises(PermissionDenied):
        TicketService.list_for_project(identity=identity(outsider), project_id=project.id)
    with pytest.raises(Http404):
        TicketService.list_for_project(identity=identity(member), project_id=project.id + 100)


@pytest.mark.django_db
def test_list_for_user_skips_orphans(project, author, member, ticket_type):
    kept = Project.objects.create(title="Kept", author_id=str(author.pk), assignees=[str(author.pk), str(member.pk)])
    _create(member, project, ticket_type)
    live = _create(member, kept, ticket_type)

    project.delete()
    assert [t.id for t in TicketService.list_for_user(user_id=str(member.pk))] == [live.id]


@pytest.mark.django_db
def test_delete_ticket_open_by_default_and_enforced_mode(project, member, outsider, ticket_type, settings):
    first = _create(member, project, ticket_type)
    TicketService.delete_ticket(identity=identity(outsider), ticket_id=first.id)
    assert not Ticket.objects.filter(id=first.id).exists()

    with pytest.raises(Http404):
        TicketService.delete_ticket(identity=identity(member), ticket_id=first.id)

    settings.TRACKER_ENFORCE_TICKET_DELETE_MEMBERSHIP = True
    second = _create(member, project, ticket_type)
    with pytest.raises(PermissionDenied):
        TicketService.delete_ticket(identity=identity(outsider), ticket_id=second.id)
    TicketService.delete_ticket(identity=identity(member), ticket_id=second.id)
    assert not Ticket.objects.exists()


@pytest.mark.django_db
def test_change_ticket_type(project, member, ticket_type):
    feature = TicketType.objects.create(name="Feature")
    ticket = _create(member, project, ticket_type)

    updated = TicketService.update_ticket(identity=identity(member), project_id=project.id, ticket_id=ticket.id, type=feature)
    updated.refresh_from_db()
    assert updated.type == feature
