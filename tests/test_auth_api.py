from conftest import BASE, signup


def test_signup_returns_token(client):
    r = client.post(f"{BASE}/auth/signup", json={"email": "New@Dealer.com", "password": "secret123"})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["email"] == "new@dealer.com"
    assert body["access_token"]


def test_signup_duplicate_email(client):
    signup(client, email="dup@example.com")
    r = client.post(f"{BASE}/auth/signup", json={"email": "DUP@example.com", "password": "another1"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Email already exists"


def test_signup_validates_input(client):
    r = client.post(f"{BASE}/auth/signup", json={"email": "nope", "password": "x"})
    assert r.status_code == 422


def test_login_and_me(client):
    signup(client, email="me@example.com", password="hunter22")

    r = client.post(f"{BASE}/auth/login", json={"email": " ME@example.com", "password": "hunter22"})
    assert r.status_code == 200, r.text
    headers = {"Authorization": f"Bearer {r.json()['access_token']}"}

    me = client.get(f"{BASE}/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "me@example.com"


def test_login_wrong_password(client):
    signup(client, email="me@example.com", password="hunter22")
    r = client.post(f"{BASE}/auth/login", json={"email": "me@example.com", "password": "wrong!!"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid login credentials"


def test_login_unknown_user(client):
    r = client.post(f"{BASE}/auth/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert r.status_code == 401


def test_protected_routes_need_a_token(client):
    assert client.get(f"{BASE}/cars").status_code == 401
    r = client.get(f"{BASE}/cars", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.headers["WWW-Authenticate"] == "Bearer"


def test_logout_revokes_token(client, auth_headers):
    assert client.get(f"{BASE}/auth/me", headers=auth_headers).status_code == 200

    r = client.post(f"{BASE}/auth/logout", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"ok": True}

    again = client.get(f"{BASE}/auth/me", headers=auth_headers)
    assert again.status_code == 401
    assert again.json()["detail"] == "Session has ended, please sign in again"
