import pytest

from tracker.models import Project, Ticket
from tracker.tests.factories import api_client, make_user, pdf


@pytest.fixture
def ticket(project, member, ticket_type):
    return Ticket.objects.create(
        project=project, type=ticket_type, title="Existing", created_by=str(member.pk),
        assignees=[str(member.pk)],
    )


@pytest.mark.django_db
def test_member_creates_ticket_with_single_string_assignee(project, member, ticket_type):
    payload = {
        "title": "Login broken",
        "type": ticket_type.id,
        "status": "open",
        "assignees": str(member.pk),
        "estimatedTime": "2.5",
        "estimatedTimeUnit": "h",
    }
    resp = api_client(member).post(f"/ticket/project/{project.id}", payload, format="multipart")
    assert resp.status_code == 201, resp.content

    body = resp.json()
    assert [u["_id"] for u in body["assignees"]] == [str(member.pk)]
    assert body["createdBy"]["_id"] == str(member.pk)
    assert body["projectId"] == {"_id": str(project.id), "title": "P1"}
    assert body["type"]["name"] == "Bug"
    assert body["estimatedTime"] == 2.5
    assert body["updatedOn"] is None

    stored = Ticket.objects.get(id=body["_id"])
    assert stored.assignees == [str(member.pk)]


@pytest.mark.django_db
def test_create_ticket_with_repeated_and_json_assignees(project, author, member, ticket_type):
    a, b = str(author.pk), str(member.pk)
    client = api_client(member)

    resp = client.post(f"/ticket/project/{project.id}",
                       {"title": "t1", "type": ticket_type.id, "assignees": [a, b]}, format="multipart")
    assert resp.status_code == 201, resp.content
    assert [u["_id"] for u in resp.json()["assignees"]] == [a, b]

    resp = client.post(f"/ticket/project/{project.id}",
                       {"title": "t2", "type": ticket_type.id, "assignees": f'["{b}","{a}"]'}, format="multipart")
    assert resp.status_code == 201, resp.content
    assert [u["_id"] for u in resp.json()["assignees"]] == [b, a]


@pytest.mark.django_db
def test_non_member_cannot_list_project_tickets(project, outsider, ticket):
    resp = api_client(outsider).get(f"/ticket/project/{project.id}")
    assert resp.status_code == 403


@pytest.mark.django_db
def test_project_tickets_include_assignee_roles(project, member, ticket):
    resp = api_client(member).get(f"/ticket/project/{project.id}")
    assert resp.status_code == 200
    (row,) = resp.json()
    assert row["assignees"][0]["role"] == {"name": "developer"}


@pytest.mark.django_db
def test_patch_ticket_ignores_protected_fields(project, author, member, ticket):
    payload = {
        "_id": ticket.id,
        "title": "Edited",
        "status": "resolved",
        "createdBy": str(author.pk),
        "projectId": "999",
        "updatedOn": "2001-01-01T00:00:00Z",
        "attachment": pdf(),
    }
    resp = api_client(author).patch(f"/ticket/project/{project.id}", payload, format="multipart")
    assert resp.status_code == 200, resp.content

    body = resp.json()
    assert body["title"] == "Edited"
    assert body["status"] == "resolved"
    assert body["createdBy"]["_id"] == str(member.pk)
    assert body["projectId"]["_id"] == str(project.id)
    assert not body["updatedOn"].startswith("2001")
    assert len(body["attachments"]) == 1

    ticket.refresh_from_db()
    assert ticket.created_by == str(member.pk)
    assert ticket.project_id == project.id


@pytest.mark.django_db
def test_patch_ticket_requires_valid_id(project, member, ticket):
    client = api_client(member)
    assert client.patch(f"/ticket/project/{project.id}", {"title": "x"}, format="multipart").status_code == 400
    assert client.patch(f"/ticket/project/{project.id}", {"_id": "abc"}, format="multipart").status_code == 400
    assert client.patch(f"/ticket/project/{project.id}", {"_id": ticket.id + 50}, format="multipart").status_code == 404


@pytest.mark.django_db
def test_ticket_detail_visibility(project, member, outsider, ticket):
    assert api_client(member).get(f"/ticket/{ticket.id}").status_code == 200
    assert api_client(outsider).get(f"/ticket/{ticket.id}").status_code == 403
    assert api_client(member).get(f"/ticket/{ticket.id + 50}").status_code == 404

    Project.objects.filter(id=project.id).delete()
    assert api_client(member).get(f"/ticket/{ticket.id}").status_code == 403


@pytest.mark.django_db
def test_user_tickets(project, member, ticket):
    other = make_user("erin", "developer")

    resp = api_client(other).get(f"/ticket/user/{member.pk}")
    assert resp.status_code == 200
    assert [t["_id"] for t in resp.json()] == [str(ticket.id)]

    assert api_client(member).get(f"/ticket/user/{other.pk}").json() == []


@pytest.mark.django_db
def test_delete_ticket(member, outsider, ticket):
    resp = api_client(outsider).delete(f"/ticket/{ticket.id}")
    assert resp.status_code == 200
    assert not Ticket.objects.filter(id=ticket.id).exists()

    assert api_client(member).delete(f"/ticket/{ticket.id}").status_code == 404
