from models.Blog import Blog, PREVIEW_LENGTH


def test_build_preview_truncates_long_content():
    short = "Short and sweet."
    assert Blog.build_preview(short) == short

    long_text = "x" * (PREVIEW_LENGTH + 50)
    preview = Blog.build_preview(long_text)
    assert preview == "x" * PREVIEW_LENGTH + "..."


def test_create_and_get_blog(client, make_user, make_blog):
    author = make_user(name="Eve")
    blog = make_blog(author, title="Hiking Patagonia", content="Wind. " * 60, location="Chile")

    assert blog["author"] == "Eve"
    assert blog["preview"].endswith("...")
    assert blog["likes"] == 0

    resp = client.get(f"/blogs/{blog['id']}")
    assert resp.status_code == 200
    assert resp.json()["content"].startswith("Wind.")

    assert client.get("/blogs/999").status_code == 404


def test_create_blog_requires_title_and_content(client, make_user):
    author = make_user()
    resp = client.post("/blogs", json={"title": " ", "content": "text"}, headers=author.headers)
    assert resp.status_code == 400
    assert client.post("/blogs", json={"title": "t", "content": "c"}).status_code == 401


def test_list_blogs_search(client, make_user, make_blog):
    author = make_user()
    make_blog(author, title="Rome in winter", location="Italy")
    make_blog(author, title="Oslo fjords", location="Norway")

    titles = [b["title"] for b in client.get("/blogs", params={"search": "norway"}).json()]
    assert titles == ["Oslo fjords"]
    assert len(client.get("/blogs").json()) == 2


def test_like_toggle_and_flags(client, make_user, make_blog):
    author = make_user()
    reader = make_user()
    blog = make_blog(author)

    resp = client.post(f"/blogs/{blog['id']}/like", headers=reader.headers)
    assert resp.json() == {"is_liked": True, "likes": 1}

    listed = client.get("/blogs", headers=reader.headers).json()[0]
    assert listed["is_liked"] is True
    assert listed["likes"] == 1
    # anonymous listing carries no personal flags
    assert client.get("/blogs").json()[0]["is_liked"] is False

    resp = client.post(f"/blogs/{blog['id']}/like", headers=reader.headers)
    assert resp.json() == {"is_liked": False, "likes": 0}


def test_wishlist_toggle_and_listing(client, make_user, make_blog):
    author = make_user()
    reader = make_user()
    first = make_blog(author, title="First")
    second = make_blog(author, title="Second")

    for blog in (first, second):
        resp = client.post(f"/blogs/{blog['id']}/wishlist", headers=reader.headers)
        assert resp.json() == {"is_wishlisted": True}

    items = client.get("/wishlist", headers=reader.headers).json()
    assert {i["id"] for i in items} == {first["id"], second["id"]}

    client.post(f"/blogs/{first['id']}/wishlist", headers=reader.headers)
    items = client.get("/wishlist", headers=reader.headers).json()
    assert [i["id"] for i in items] == [second["id"]]

    assert client.post("/blogs/999/wishlist", headers=reader.headers).status_code == 404
