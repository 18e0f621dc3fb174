import pytest


@pytest.fixture
def pushes(monkeypatch):
    sent = []
    monkeypatch.setattr(
        "routes.buddies.notify_buddy_request",
        lambda receiver, name, request_id: sent.append(("request", receiver.id, name)),
    )
    monkeypatch.setattr(
        "routes.buddies.notify_buddy_accepted",
        lambda requester, name, request_id: sent.append(("accepted", requester.id, name)),
    )
    return sent


def send(client, sender, receiver_id):
    return client.post("/buddies/requests", json={"receiver_id": receiver_id}, headers=sender.headers)


def test_send_request_validation(client, make_user, pushes):
    alice = make_user()
    assert send(client, alice, None).status_code == 400
    assert send(client, alice, alice.id).status_code == 400
    assert send(client, alice, 999).status_code == 404


def test_duplicate_request_rejected(client, make_user, pushes):
    alice, bob = make_user(), make_user()

    resp = send(client, alice, bob.id)
    assert resp.status_code == 201
    assert resp.json()["status"] == "PENDING"

    resp = send(client, alice, bob.id)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Buddy request already sent"


def test_concurrent_duplicate_request_hits_unique_constraint(client, make_user, pushes, monkeypatch):
    alice, bob = make_user(), make_user()
    monkeypatch.setattr("routes.buddies.find_request", lambda db, requester_id, receiver_id: None)

    assert send(client, alice, bob.id).status_code == 201

    resp = send(client, alice, bob.id)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Duplicate record"
    assert client.get("/buddies/requests/pending", headers=bob.headers).status_code == 200


def test_accept_puts_buddy_in_both_lists_once(client, make_user, pushes):
    alice, bob = make_user(name="Alice"), make_user(name="Bob")
    req = send(client, alice, bob.id).json()

    resp = client.patch(f"/buddies/requests/{req['id']}", json={"action": "accept"}, headers=bob.headers)
    assert resp.status_code == 200
    assert resp.json()["request"]["status"] == "ACCEPTED"

    # reverse-direction request is a separate row; accepting it must not duplicate
    reverse = send(client, bob, alice.id).json()
    client.patch(f"/buddies/requests/{reverse['id']}", json={"action": "accept"}, headers=alice.headers)

    alice_buddies = client.get("/buddies/requests", headers=alice.headers).json()
    bob_buddies = client.get("/buddies/requests", headers=bob.headers).json()
    assert [b["id"] for b in alice_buddies] == [bob.id]
    assert [b["id"] for b in bob_buddies] == [alice.id]

    chat_buddies = client.get("/chat-buddies", headers=alice.headers).json()
    assert chat_buddies == [{"id": bob.id, "name": "Bob", "email": bob.email, "avatar": None}]


def test_only_receiver_may_accept_or_decline(client, make_user, pushes):
    alice, bob, carol = make_user(), make_user(), make_user()
    req = send(client, alice, bob.id).json()

    for who in (alice, carol):
        resp = client.patch(f"/buddies/requests/{req['id']}", json={"action": "accept"}, headers=who.headers)
        assert resp.status_code == 403


def test_non_pending_transitions_conflict(client, make_user, pushes):
    alice, bob = make_user(), make_user()
    req = send(client, alice, bob.id).json()

    resp = client.patch(f"/buddies/requests/{req['id']}", json={"action": "decline"}, headers=bob.headers)
    assert resp.json()["request"]["status"] == "REJECTED"

    resp = client.patch(f"/buddies/requests/{req['id']}", json={"action": "accept"}, headers=bob.headers)
    assert resp.status_code == 409
    resp = client.patch(f"/buddies/requests/{req['id']}", json={"action": "cancel"}, headers=alice.headers)
    assert resp.status_code == 409


def test_invalid_action_and_unknown_request(client, make_user, pushes):
    alice = make_user()
    resp = client.patch("/buddies/requests/1", json={"action": "maybe"}, headers=alice.headers)
    assert resp.status_code == 400
    resp = client.patch("/buddies/requests/999", json={"action": "accept"}, headers=alice.headers)
    assert resp.status_code == 404


def test_cancel_deletes_request(client, make_user, pushes):
    alice, bob = make_user(), make_user()
    req = send(client, alice, bob.id).json()

    resp = client.patch(f"/buddies/requests/{req['id']}", json={"action": "cancel"}, headers=bob.headers)
    assert resp.status_code == 403

    resp = client.delete(f"/buddies/requests/{req['id']}", headers=alice.headers)
    assert resp.status_code == 204

    pending = client.get("/buddies/requests/pending", headers=bob.headers).json()
    assert pending["incoming_count"] == 0


def test_pending_requests_split_by_direction(client, make_user, pushes):
    alice, bob, carol = make_user(), make_user(), make_user(bio="Loves trains")
    send(client, alice, bob.id)
    send(client, carol, alice.id)

    pending = client.get("/buddies/requests/pending", headers=alice.headers).json()
    assert pending["outgoing_count"] == 1
    assert pending["incoming_count"] == 1
    assert pending["outgoing"][0]["user"]["id"] == bob.id
    assert pending["outgoing"][0]["type"] == "outgoing"
    assert pending["incoming"][0]["user"]["bio"] == "Loves trains"
    assert pending["incoming"][0]["status"] == "PENDING"


def test_push_sent_only_to_registered_devices(client, make_user, pushes):
    alice, bob, carol = make_user(name="Alice"), make_user(name="Bob"), make_user()
    client.put("/profile/fcm-token", json={"fcm_token": "bob-device"}, headers=bob.headers)

    req = send(client, alice, bob.id).json()
    send(client, alice, carol.id)
    assert pushes == [("request", bob.id, "Alice")]

    client.put("/profile/fcm-token", json={"fcm_token": "alice-device"}, headers=alice.headers)
    client.patch(f"/buddies/requests/{req['id']}", json={"action": "accept"}, headers=bob.headers)
    assert pushes[-1] == ("accepted", alice.id, "Bob")


def test_search_buddies(client, make_user, make_trip):
    me = make_user(name="Me")
    hiker = make_user(name="Hana", interests="hiking, photography")
    make_user(name="Otto", interests="museums")
    make_user(name="Admin", admin=True)
    make_trip(hiker)

    results = client.get("/buddies", params={"search": "HIK"}, headers=me.headers).json()
    assert [r["id"] for r in results] == [hiker.id]
    assert results[0]["interests"] == ["hiking", "photography"]
    assert results[0]["trips_completed"] == 1
    assert results[0]["avatar"] == "/placeholder.svg"

    everyone = client.get("/buddies", headers=me.headers).json()
    assert {r["name"] for r in everyone} == {"Hana", "Otto"}
