import json

import pytest

API = "/api/v1"


@pytest.fixture
def alice(auth_headers):
    return auth_headers("alice", "Alice Liddell")


@pytest.fixture
def bob(auth_headers):
    return auth_headers("bob")


@pytest.fixture
def design_id(client, alice):
    response = client.post(f"{API}/designs", json={"name": "Pet Store"}, headers=alice)
    assert response.status_code == 201
    return response.get_json()["id"]


def invite_and_accept(client, design_id, owner_headers, user_headers):
    invite = client.post(f"{API}/designs/{design_id}/invitations", json={}, headers=owner_headers)
    invite_id = invite.get_json()["inviteId"]
    return client.put(f"{API}/designs/{design_id}/invitations/{invite_id}", headers=user_headers)


def test_health_is_public(client):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_token_is_required(client):
    assert client.get(f"{API}/designs").status_code == 401


def test_create_and_fetch_design(client, alice, design_id):
    response = client.get(f"{API}/designs/{design_id}", headers=alice)

    body = response.get_json()
    assert response.status_code == 200
    assert body["name"] == "Pet Store"
    assert body["createdBy"] == "alice"
    assert [d["id"] for d in client.get(f"{API}/designs", headers=alice).get_json()] == [design_id]


def test_blank_spec_version_creates_swagger_2(client, alice):
    created = client.post(f"{API}/designs", json={"name": "Pets", "specVersion": ""}, headers=alice)

    content = client.get(f"{API}/designs/{created.get_json()['id']}/content", headers=alice)
    assert json.loads(content.get_data(as_text=True))["swagger"] == "2.0"


def test_create_without_name_is_rejected(client, alice):
    response = client.post(f"{API}/designs", json={}, headers=alice)

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_request"


def test_unknown_and_foreign_designs_look_the_same(client, bob, design_id):
    foreign = client.get(f"{API}/designs/{design_id}", headers=bob)
    missing = client.get(f"{API}/designs/does-not-exist", headers=bob)

    assert foreign.status_code == missing.status_code == 404
    assert foreign.get_json()["error"] == missing.get_json()["error"] == "not_found"


def test_editing_handshake_headers(client, alice, design_id):
    response = client.put(f"{API}/designs/{design_id}", headers=alice)

    assert response.status_code == 200
    assert response.headers["X-Content-Version"] == "0"
    assert len(response.headers["X-Editing-Session-Id"]) == 64
    assert json.loads(response.get_data(as_text=True))["info"]["title"] == "Pet Store"


def test_append_command_and_conflict(client, alice, design_id):
    command = {"type": "set", "path": "/info/title", "value": "Pets"}
    headers = {**alice, "X-Content-Version": "0"}

    first = client.post(f"{API}/designs/{design_id}/commands", json={"command": command}, headers=headers)
    stale = client.post(f"{API}/designs/{design_id}/commands", json={"command": command}, headers=headers)

    assert first.status_code == 201
    assert first.get_json() == {"version": 1}
    assert first.headers["X-Content-Version"] == "1"
    assert stale.status_code == 409
    assert stale.get_json()["error"] == "version_conflict"
    assert stale.get_json()["details"] == {"expected": 0, "current": 1}

    content = client.get(f"{API}/designs/{design_id}/content", headers=alice)
    assert content.headers["X-Content-Version"] == "1"
    assert json.loads(content.get_data(as_text=True))["info"]["title"] == "Pets"


def test_append_with_base_version_in_body(client, alice, design_id):
    response = client.post(
        f"{API}/designs/{design_id}/commands",
        json={"baseVersion": 0, "command": {"type": "add", "path": "/tags", "value": []}},
        headers=alice,
    )

    assert response.status_code == 201


def test_append_requires_base_version(client, alice, design_id):
    response = client.post(
        f"{API}/designs/{design_id}/commands",
        json={"command": {"type": "set", "path": "/info/title", "value": "x"}},
        headers=alice,
    )

    assert response.status_code == 400


def test_inapplicable_command_is_unprocessable(client, alice, design_id):
    response = client.post(
        f"{API}/designs/{design_id}/commands",
        json={"baseVersion": 0, "command": {"type": "delete", "path": "/no/such/member"}},
        headers=alice,
    )

    assert response.status_code == 422
    assert response.get_json()["error"] == "command_application"


def test_content_as_yaml(client, alice, design_id):
    response = client.get(f"{API}/designs/{design_id}/content?format=yaml", headers=alice)

    assert response.status_code == 200
    assert response.content_type.startswith("application/x-yaml")
    assert "title: Pet Store" in response.get_data(as_text=True)


def test_invitation_flow(client, alice, bob, auth_headers, design_id):
    invite = client.post(f"{API}/designs/{design_id}/invitations", json={}, headers=alice)
    body = invite.get_json()
    assert invite.status_code == 201
    assert body["status"] == "pending"
    assert body["createdByName"] == "Alice Liddell"

    url = f"{API}/designs/{design_id}/invitations/{body['inviteId']}"
    accepted = client.put(url, headers=bob)
    assert accepted.status_code == 200
    assert accepted.get_json()["role"] == "collaborator"

    assert client.put(url, headers=auth_headers("carol")).status_code == 404
    assert client.get(url, headers=bob).get_json()["status"] == "accepted"


def test_collaborator_cannot_invite(client, alice, bob, design_id):
    invite_and_accept(client, design_id, alice, bob)

    response = client.post(f"{API}/designs/{design_id}/invitations", json={}, headers=bob)

    assert response.status_code == 403
    assert response.get_json()["error"] == "access_denied"


def test_managing_collaborators(client, alice, bob, design_id):
    invite_and_accept(client, design_id, alice, bob)
    collaborators = f"{API}/designs/{design_id}/collaborators"

    listed = client.get(collaborators, headers=bob).get_json()
    assert {c["userId"]: c["role"] for c in listed} == {"alice": "owner", "bob": "collaborator"}

    promote = client.put(f"{collaborators}/bob", json={"newRole": "owner"}, headers=alice)
    assert promote.status_code == 400
    assert promote.get_json()["error"] == "invariant_violation"

    assert client.put(f"{collaborators}/bob", json={}, headers=alice).status_code == 400
    assert client.delete(f"{collaborators}/alice", headers=bob).status_code == 403
    assert client.delete(f"{collaborators}/bob", headers=alice).status_code == 204
    assert client.get(f"{API}/designs/{design_id}", headers=bob).status_code == 404


def test_activity_and_contributors(client, alice, bob, design_id):
    invite_and_accept(client, design_id, alice, bob)
    for version, (headers, title) in enumerate([(alice, "A"), (bob, "B"), (bob, "C")]):
        client.post(
            f"{API}/designs/{design_id}/commands",
            json={"baseVersion": version, "command": {"type": "set", "path": "/info/title", "value": title}},
            headers=headers,
        )

    activity = client.get(f"{API}/designs/{design_id}/activity?start=0&end=2", headers=alice).get_json()
    contributors = client.get(f"{API}/designs/{design_id}/contributors", headers=alice).get_json()

    assert [item["version"] for item in activity["items"]] == [3, 2]
    assert contributors == [{"name": "alice", "edits": 2}, {"name": "bob", "edits": 2}]


def test_rebase_is_owner_only(client, alice, bob, design_id):
    invite_and_accept(client, design_id, alice, bob)
    client.post(
        f"{API}/designs/{design_id}/commands",
        json={"baseVersion": 0, "command": {"type": "set", "path": "/info/title", "value": "Pets"}},
        headers=bob,
    )

    assert client.post(f"{API}/designs/{design_id}/rebase", headers=bob).status_code == 403

    rebased = client.post(f"{API}/designs/{design_id}/rebase", headers=alice)
    assert rebased.get_json() == {"version": 1}


def test_delete_design(client, alice, design_id):
    assert client.delete(f"{API}/designs/{design_id}", headers=alice).status_code == 204
    assert client.get(f"{API}/designs/{design_id}", headers=alice).status_code == 404


def test_openapi_document_is_served(client):
    response = client.get("/openapi/hub.yaml")

    assert response.status_code == 200
    assert b"openapi:" in response.data
