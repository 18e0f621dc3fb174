def test_get_and_update_profile(client, make_user):
    user = make_user(name="Dana")

    resp = client.patch(
        "/profile",
        json={"location": "Porto", "interests": "hiking, food", "bio": "  ", "name": ""},
        headers=user.headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["location"] == "Porto"
    assert data["interests"] == "hiking, food"
    # blank values leave the field untouched
    assert data["name"] == "Dana"
    assert data["bio"] is None

    assert client.get("/profile", headers=user.headers).json()["location"] == "Porto"


def test_change_password(client, make_user):
    user = make_user(password="old-pass")

    resp = client.patch(
        "/profile/password",
        json={"current_password": "wrong", "new_password": "new-pass"},
        headers=user.headers,
    )
    assert resp.status_code == 400

    resp = client.patch(
        "/profile/password",
        json={"current_password": "old-pass", "new_password": ""},
        headers=user.headers,
    )
    assert resp.status_code == 400

    resp = client.patch(
        "/profile/password",
        json={"current_password": "old-pass", "new_password": "new-pass"},
        headers=user.headers,
    )
    assert resp.status_code == 200

    resp = client.post("/auth/signin", json={"email": user.email, "password": "new-pass"})
    assert resp.status_code == 200


def test_register_fcm_token(client, make_user, db_session):
    from models.User import User

    user = make_user()
    resp = client.put("/profile/fcm-token", json={"fcm_token": "device-abc"}, headers=user.headers)
    assert resp.status_code == 200

    stored = db_session.query(User).filter(User.id == user.id).first()
    assert stored.fcm_token == "device-abc"
