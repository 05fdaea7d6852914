from fastapi.testclient import TestClient


def register(client: TestClient, username: str, password: str = "pw") -> dict:
    """Create a user and return bearer headers for it."""
    resp = client.post("/users", json={"username": username, "password": password})
    assert resp.status_code == 201, resp.text
    resp = client.post("/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


def create_post(client: TestClient, headers: dict, content: str = "hello") -> str:
    resp = client.post("/posts", json={"content": content}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["post"]["id"]
