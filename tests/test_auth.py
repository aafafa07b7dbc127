import bcrypt


def _register(client, username="alice", email="Alice@Example.com", password="secret123"):
    return client.post("/auth/register", json={"username": username, "email": email, "password": password})


def test_register_returns_token_and_hides_password(client, db):
    r = _register(client)
    assert r.status_code == 201, r.text
    j = r.json()
    assert j["token_type"] == "bearer"
    assert j["access_token"]
    assert "password" not in j["user"]
    assert j["user"]["email"] == "alice@example.com"

    stored = db.users.find_one({"username": "alice"})
    assert stored["password"] != "secret123"
    assert bcrypt.checkpw(b"secret123", stored["password"].encode())


def test_register_duplicate_username_conflicts(client):
    assert _register(client).status_code == 201
    r = _register(client, email="other@example.com")
    assert r.status_code == 409
    assert r.json()["detail"] == "Username already taken"


def test_register_duplicate_email_is_case_insensitive(client):
    assert _register(client).status_code == 201
    r = _register(client, username="alice2", email="ALICE@example.com")
    assert r.status_code == 409
    assert r.json()["detail"] == "Email already registered"


def test_register_validation_errors_are_listed(client):
    r = _register(client, username="al", password="123")
    assert r.status_code == 400
    fields = {e["loc"][-1] for e in r.json()["errors"]}
    assert {"username", "password"} <= fields


def test_login_and_me(client):
    _register(client)
    r = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert r.status_code == 200, r.text
    token = r.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "alice"
    assert me.json()["email"] == "alice@example.com"
    assert "password" not in me.json()


def test_login_wrong_password(client):
    _register(client)
    r = client.post("/auth/login", json={"email": "alice@example.com", "password": "nope-nope"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid credentials"


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    bad = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401


def test_token_for_deleted_user_rejected(client, alice, db):
    uid, headers = alice
    db.users.delete_one({"_id": uid})
    assert client.get("/auth/me", headers=headers).status_code == 401
