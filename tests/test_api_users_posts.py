from helpers import create_post, register


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200


def test_duplicate_username_is_a_conflict(client):
    register(client, "alice")
    resp = client.post("/users", json={"username": "alice", "password": "x"})
    assert resp.status_code == 409
    assert resp.json() == {
        "ok": False,
        "error": "Username 'alice' is already taken",
        "details": "already_exists",
    }


def test_login_with_wrong_password(client):
    register(client, "alice", password="right")
    resp = client.post("/auth/login", json={"username": "alice", "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json()["details"] == "unauthenticated"


def test_session_requires_credentials(client):
    assert client.get("/auth/session").status_code == 401
    assert client.get("/auth/session", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_session_accepts_cookie(client):
    client.post("/users", json={"username": "alice", "password": "pw"})
    client.post("/auth/login", json={"username": "alice", "password": "pw"})

    resp = client.get("/auth/session")

    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"


def test_unknown_user_is_not_found(client):
    resp = client.get("/users/nobody")
    assert resp.status_code == 404
    assert resp.json()["details"] == "not_found"


def test_update_username_and_password(client):
    headers = register(client, "alice", password="old")

    resp = client.patch("/users/username", json={"username": "alicia"}, headers=headers)
    assert resp.json()["username"] == "alicia"

    resp = client.patch(
        "/users/password",
        json={"current_password": "wrong", "new_password": "new"},
        headers=headers,
    )
    assert resp.status_code == 403

    resp = client.patch(
        "/users/password",
        json={"current_password": "old", "new_password": "new"},
        headers=headers,
    )
    assert resp.status_code == 200
    resp = client.post("/auth/login", json={"username": "alicia", "password": "new"})
    assert resp.status_code == 200


def test_posts_are_listed_newest_first(client):
    headers = register(client, "alice")
    first = create_post(client, headers, "first")
    second = create_post(client, headers, "second")

    posts = client.get("/posts").json()

    assert [p["id"] for p in posts] == [second, first]
    assert posts[0]["author"] == "alice"


def test_posts_filtered_by_author(client):
    alice = register(client, "alice")
    bob = register(client, "bob")
    create_post(client, alice)
    bobs = create_post(client, bob)

    posts = client.get("/posts", params={"author": "bob"}).json()

    assert [p["id"] for p in posts] == [bobs]


def test_blank_post_is_invalid(client):
    headers = register(client, "alice")
    resp = client.post("/posts", json={"content": "   "}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["details"] == "invalid_operation"


def test_only_author_can_edit_or_delete(client):
    alice = register(client, "alice")
    bob = register(client, "bob")
    post_id = create_post(client, alice)

    assert client.patch(f"/posts/{post_id}", json={"content": "x"}, headers=bob).status_code == 403
    assert client.delete(f"/posts/{post_id}", headers=bob).status_code == 403

    resp = client.patch(f"/posts/{post_id}", json={"content": "edited"}, headers=alice)
    assert resp.json()["content"] == "edited"
    assert client.delete(f"/posts/{post_id}", headers=alice).status_code == 200
    assert client.delete(f"/posts/{post_id}", headers=alice).status_code == 404


def test_deleting_user_cascades(client):
    alice = register(client, "alice")
    bob = register(client, "bob")
    alices_post = create_post(client, alice)
    bobs_post = create_post(client, bob)
    client.post(f"/friends/requests/bob", headers=alice)
    client.put("/friends/accept/alice", headers=bob)
    client.post(f"/favoriting/{bobs_post}/toggle", headers=alice)

    assert client.delete("/users", headers=alice).status_code == 200

    assert client.get("/friends", headers=bob).json() == {"count": 0, "friends": []}
    assert client.get(f"/favoriting/{bobs_post}/count").json()["count"] == 0
    assert client.get(f"/favoriting/{alices_post}/count").status_code == 404
    assert [p["id"] for p in client.get("/posts").json()] == [bobs_post]
    assert client.get("/auth/session", headers=alice).status_code == 401
