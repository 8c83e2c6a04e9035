# tests/api/endpoints/test_misc.py
def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "time" in body


def test_list_demo_users(client):
    response = client.get("/api/users")
    assert response.status_code == 200
    users = response.json()["users"]
    assert [(u["id"], u["role"]) for u in users] == [
        ("A1", "admin"),
        ("D1", "default"),
        ("D2", "default"),
        ("R1", "readonly"),
    ]
