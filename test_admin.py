def test_admin_only(client, make_user):
    customer = make_user()
    assert client.get("/admin/users", headers=customer.headers).status_code == 403
    assert client.get("/admin/users").status_code == 401


def test_list_and_filter_users(client, make_user, make_trip):
    admin = make_user(admin=True)
    regular = make_user(name="Rita", email="rita@example.com")
    premium = make_user(name="Pete", is_premium=True)
    make_trip(regular)

    users = client.get("/admin/users", headers=admin.headers).json()
    assert {u["id"] for u in users} == {regular.id, premium.id}

    rita = [u for u in users if u["id"] == regular.id][0]
    assert rita["trips_completed"] == 1
    assert rita["status"] == "active"

    resp = client.get("/admin/users", params={"filter": "premium"}, headers=admin.headers)
    assert [u["id"] for u in resp.json()] == [premium.id]
    resp = client.get("/admin/users", params={"filter": "regular"}, headers=admin.headers)
    assert [u["id"] for u in resp.json()] == [regular.id]
    resp = client.get("/admin/users", params={"search": "RITA@"}, headers=admin.headers)
    assert [u["id"] for u in resp.json()] == [regular.id]
    resp = client.get("/admin/users", params={"filter": "gold"}, headers=admin.headers)
    assert resp.status_code == 400


def test_toggle_premium(client, make_user):
    admin = make_user(admin=True)
    user = make_user()

    resp = client.patch(f"/admin/users/{user.id}", json={"is_premium": True}, headers=admin.headers)
    assert resp.status_code == 200
    assert resp.json()["is_premium"] is True

    # the flag is read fresh on each request, so existing tokens see it
    assert client.get("/groups", headers=user.headers).status_code == 200

    assert client.patch("/admin/users/999", json={"is_premium": True}, headers=admin.headers).status_code == 404


def test_delete_user_cascades(client, make_user, make_blog, make_trip):
    admin = make_user(admin=True)
    doomed = make_user()
    other = make_user()

    blog = make_blog(doomed)
    client.post(f"/blogs/{blog['id']}/like", headers=other.headers)
    trip = make_trip(doomed)
    client.post(f"/trips/{trip['id']}/join", headers=other.headers)
    client.post("/buddies/requests", json={"receiver_id": other.id}, headers=doomed.headers)
    client.post("/chats", json={"member_ids": [other.id]}, headers=doomed.headers)

    assert client.delete(f"/admin/users/{doomed.id}", headers=admin.headers).status_code == 204

    assert client.get(f"/blogs/{blog['id']}").status_code == 404
    assert client.get(f"/trips/{trip['id']}").status_code == 404
    pending = client.get("/buddies/requests/pending", headers=other.headers).json()
    assert pending["incoming_count"] == 0
    assert client.get("/profile", headers=doomed.headers).status_code == 401

    assert client.delete("/admin/users/999", headers=admin.headers).status_code == 404
