from helpers import create_post, register


def test_toggle_favorite(client):
    alice = register(client, "alice")
    post_id = create_post(client, alice)

    resp = client.post(f"/favoriting/{post_id}/toggle", headers=alice)
    assert resp.json() == {"post_id": post_id, "favorited": True, "count": 1}

    favorites = client.get("/favoriting/users/alice").json()
    assert [p["id"] for p in favorites] == [post_id]

    resp = client.post(f"/favoriting/{post_id}/toggle", headers=alice)
    assert resp.json() == {"post_id": post_id, "favorited": False, "count": 0}


def test_favoriting_missing_post(client):
    alice = register(client, "alice")
    assert client.post("/favoriting/missing/toggle", headers=alice).status_code == 404
    assert client.get("/favoriting/missing/count").status_code == 404


def test_favorite_trending(client):
    users = [register(client, name) for name in ("alice", "bob", "carol")]
    quiet = create_post(client, users[0], "quiet")
    popular = create_post(client, users[0], "popular")
    for headers in users:
        client.post(f"/favoriting/{popular}/toggle", headers=headers)
    client.post(f"/favoriting/{quiet}/toggle", headers=users[1])

    trending = client.get("/favoriting/trending").json()
    assert [(t["post"]["id"], t["score"]) for t in trending] == [(popular, 3), (quiet, 1)]

    trending = client.get("/favoriting/trending", params={"limit": 1}).json()
    assert [t["post"]["id"] for t in trending] == [popular]

    assert client.get("/favoriting/trending", params={"limit": -1}).status_code == 422


def test_create_remix_credits_original_artist(client):
    alice = register(client, "alice")
    bob = register(client, "bob")
    original = create_post(client, alice, "original")
    remix = create_post(client, bob, "remix")

    resp = client.post(f"/remixing/{original}/remixes", json={"remix_id": remix}, headers=bob)

    assert resp.status_code == 201
    assert resp.json() == {"original_id": original, "remix_id": remix, "original_artist": "alice"}
    assert [p["id"] for p in client.get(f"/remixing/{original}/remixes").json()] == [remix]

    body = client.get(f"/remixing/{remix}/original").json()
    assert body["original"]["id"] == original
    remix_post = [p for p in client.get("/posts").json() if p["id"] == remix][0]
    assert remix_post["original_artist"] == "alice"


def test_remix_errors(client):
    alice = register(client, "alice")
    bob = register(client, "bob")
    original = create_post(client, alice)
    other = create_post(client, alice)
    remix = create_post(client, bob)

    # only the remix's author may link it
    resp = client.post(f"/remixing/{original}/remixes", json={"remix_id": remix}, headers=alice)
    assert resp.status_code == 403

    resp = client.post(f"/remixing/{remix}/remixes", json={"remix_id": remix}, headers=bob)
    assert resp.status_code == 400

    client.post(f"/remixing/{original}/remixes", json={"remix_id": remix}, headers=bob)
    resp = client.post(f"/remixing/{other}/remixes", json={"remix_id": remix}, headers=bob)
    assert resp.status_code == 409
    assert resp.json()["details"] == "already_remix"

    resp = client.post("/remixing/missing/remixes", json={"remix_id": remix}, headers=bob)
    assert resp.status_code == 404


def test_original_of_unremixed_post(client):
    alice = register(client, "alice")
    post_id = create_post(client, alice)
    assert client.get(f"/remixing/{post_id}/original").json() == {"post_id": post_id, "original": None}


def test_deleting_original_drops_remix_links(client):
    alice = register(client, "alice")
    bob = register(client, "bob")
    original = create_post(client, alice)
    remix = create_post(client, bob)
    client.post(f"/remixing/{original}/remixes", json={"remix_id": remix}, headers=bob)

    client.delete(f"/posts/{original}", headers=alice)

    assert client.get(f"/remixing/{remix}/original").json()["original"] is None


def test_remix_trending(client):
    alice = register(client, "alice")
    bob = register(client, "bob")
    first = create_post(client, alice)
    second = create_post(client, alice)
    for _ in range(2):
        remix = create_post(client, bob)
        client.post(f"/remixing/{second}/remixes", json={"remix_id": remix}, headers=bob)

    trending = client.get("/remixing/trending", params={"limit": 2}).json()

    assert [(t["post"]["id"], t["score"]) for t in trending][0] == (second, 2)
    assert first not in [t["post"]["id"] for t in trending]
