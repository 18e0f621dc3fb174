def test_participants_manage_todos(client, make_user, make_trip):
    creator, member = make_user(), make_user()
    trip = make_trip(creator)
    client.post(f"/trips/{trip['id']}/join", headers=member.headers)

    resp = client.post(f"/trips/{trip['id']}/todos", json={"text": "  Pack boots "}, headers=member.headers)
    assert resp.status_code == 201
    todo = resp.json()
    assert todo["text"] == "Pack boots"
    assert todo["completed"] is False
    assert todo["created_by"] == member.id

    resp = client.patch(f"/todos/{todo['id']}", json={"completed": True}, headers=creator.headers)
    assert resp.json()["completed"] is True

    resp = client.patch(f"/todos/{todo['id']}", json={"text": "Pack hiking boots"}, headers=creator.headers)
    assert resp.json()["text"] == "Pack hiking boots"
    assert resp.json()["completed"] is True

    detail = client.get(f"/trips/{trip['id']}").json()
    assert [t["text"] for t in detail["todos"]] == ["Pack hiking boots"]

    assert client.delete(f"/todos/{todo['id']}", headers=member.headers).status_code == 204
    assert client.get(f"/trips/{trip['id']}").json()["todos"] == []


def test_outsiders_get_forbidden(client, make_user, make_trip):
    creator, outsider = make_user(), make_user()
    trip = make_trip(creator)
    todo = client.post(f"/trips/{trip['id']}/todos", json={"text": "Visa"}, headers=creator.headers).json()

    resp = client.post(f"/trips/{trip['id']}/todos", json={"text": "Hi"}, headers=outsider.headers)
    assert resp.status_code == 403
    assert client.patch(f"/todos/{todo['id']}", json={"completed": True}, headers=outsider.headers).status_code == 403
    assert client.delete(f"/todos/{todo['id']}", headers=outsider.headers).status_code == 403


def test_todo_errors(client, make_user, make_trip):
    creator = make_user()
    trip = make_trip(creator)

    resp = client.post(f"/trips/{trip['id']}/todos", json={"text": " "}, headers=creator.headers)
    assert resp.status_code == 400
    assert client.post("/trips/999/todos", json={"text": "x"}, headers=creator.headers).status_code == 404
    assert client.patch("/todos/999", json={"completed": True}, headers=creator.headers).status_code == 404
    assert client.delete("/todos/999", headers=creator.headers).status_code == 404


def test_todos_ordered_by_creation(client, make_user, make_trip):
    creator = make_user()
    trip = make_trip(creator)
    for text in ("one", "two", "three"):
        client.post(f"/trips/{trip['id']}/todos", json={"text": text}, headers=creator.headers)

    detail = client.get(f"/trips/{trip['id']}").json()
    assert [t["text"] for t in detail["todos"]] == ["one", "two", "three"]
