def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_admin_login(client):
    r = client.post("/v1/auth/login", json={"username": "admin", "password": "admin"})
    assert r.status_code == 200
    body = r.json()
    assert body["type"] == "admin"
    assert body["id"] == "admin"
    assert body["token"]
    assert body["dbStatus"] == "connected"


def test_wrong_password(client):
    r = client.post("/v1/auth/login", json={"username": "admin", "password": "nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Identifiants incorrects"


def test_student_login_with_temporary_password(client, student):
    r = client.post("/v1/auth/login", json={"username": "JEAN DUPONT", "password": student.temporary_password})
    assert r.status_code == 200
    assert r.json()["type"] == "student"
    assert r.json()["id"] == student.id


def test_instructor_login(client, admin_headers):
    r = client.post(
        "/v1/instructors/",
        json={"fullName": "Paul Martin", "username": "paul", "password": "secret"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert "password" not in r.json()["data"]

    r = client.post("/v1/auth/login", json={"username": "paul", "password": "secret"})
    assert r.json()["type"] == "admin"
    assert r.json()["name"] == "Paul Martin"

    dup = client.post(
        "/v1/instructors/",
        json={"fullName": "Autre", "username": "paul", "password": "secret"},
        headers=admin_headers,
    )
    assert dup.status_code == 409


def test_me_and_logout(client, admin_headers):
    assert client.get("/v1/auth/me", headers=admin_headers).json()["data"]["name"] == "Administrateur"
    assert client.post("/v1/auth/logout", headers=admin_headers).status_code == 200
    assert client.get("/v1/auth/me", headers=admin_headers).status_code == 401


def test_missing_or_malformed_header(client):
    assert client.get("/v1/auth/me").status_code == 401
    assert client.get("/v1/auth/me", headers={"Authorization": "Token abc"}).status_code == 401


def test_student_cannot_reach_admin_routes(client, student_headers):
    assert client.get("/v1/students/", headers=student_headers).status_code == 403


def test_change_password(client, student, student_headers):
    r = client.post(
        "/v1/auth/change-password",
        json={"currentPassword": student.temporary_password, "newPassword": "nouveau"},
        headers=student_headers,
    )
    assert r.status_code == 200

    old = client.post("/v1/auth/login", json={"username": "Jean Dupont", "password": student.temporary_password})
    assert old.status_code == 401
    new = client.post("/v1/auth/login", json={"username": "Jean Dupont", "password": "nouveau"})
    assert new.status_code == 200
