PASSWORD = "Passw0rd!"
ADMIN_EMAIL = "admin@example.com"


class TestAuth:
    def test_register_and_login(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "johndoe", "email": "john@example.com", "password": PASSWORD},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "johndoe"
        assert body["role"] == "user"
        assert "pass_hash" not in body

        response = client.post("/api/auth/login", json={"email": "john@example.com", "password": PASSWORD})
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_duplicate_email(self, client, make_user):
        make_user("johndoe")
        response = client.post(
            "/api/auth/register",
            json={"username": "janedoe", "email": "johndoe@example.com", "password": PASSWORD},
        )
        assert response.status_code == 409
        assert response.json()["message"] == "user with email 'johndoe@example.com' already exists"

    def test_duplicate_username(self, client, make_user):
        make_user("johndoe")
        response = client.post(
            "/api/auth/register",
            json={"username": "johndoe", "email": "other@example.com", "password": PASSWORD},
        )
        assert response.status_code == 409

    def test_weak_password_is_rejected(self, client):
        for password in ("short1!", "nouppercase1!", "NOLOWERCASE1!", "NoDigits!!", "NoSpecial11"):
            response = client.post(
                "/api/auth/register",
                json={"username": "johndoe", "email": "john@example.com", "password": password},
            )
            assert response.status_code == 400, password
            assert "password" in response.json()["message"]

    def test_invalid_username_length(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "joe", "email": "joe@example.com", "password": PASSWORD},
        )
        assert response.status_code == 400

    def test_wrong_password(self, client):
        response = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "Wrong0ne!"})
        assert response.status_code == 401
        assert response.json() == {"message": "invalid email or password"}

    def test_unknown_email(self, client):
        response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
        assert response.status_code == 401


class TestUsers:
    def test_get_by_id_and_username(self, client, make_user):
        user_id, _ = make_user("johndoe")
        assert client.get(f"/api/users/{user_id}").json()["username"] == "johndoe"
        assert client.get("/api/users/username/johndoe").json()["id"] == user_id

        response = client.get("/api/users/username/nobody")
        assert response.status_code == 404
        assert response.json()["message"] == "user with username 'nobody' not found"

    def test_update_own_bio(self, client, make_user):
        user_id, headers = make_user("johndoe")
        response = client.put(f"/api/users/{user_id}", json={"bio": "hello"}, headers=headers)
        assert response.status_code == 200
        assert client.get(f"/api/users/{user_id}").json()["bio"] == "hello"

    def test_cannot_update_other_user(self, client, make_user):
        user_id, _ = make_user("johndoe")
        _, other_headers = make_user("janedoe")
        response = client.put(f"/api/users/{user_id}", json={"bio": "hacked"}, headers=other_headers)
        assert response.status_code == 403
        assert response.json() == {"message": "insufficient permissions"}

    def test_missing_token(self, client, make_user):
        user_id, _ = make_user("johndoe")
        response = client.put(f"/api/users/{user_id}", json={"bio": "x"})
        assert response.status_code == 401
        assert response.json() == {"message": "invalid or missing token"}

    def test_admin_can_update_any_user(self, client, make_user, admin_headers):
        user_id, _ = make_user("johndoe")
        response = client.put(f"/api/users/{user_id}", json={"bio": "by admin"}, headers=admin_headers)
        assert response.status_code == 200

    def test_delete_user(self, client, make_user):
        user_id, headers = make_user("johndoe")
        assert client.delete(f"/api/users/{user_id}", headers=headers).status_code == 200
        assert client.get(f"/api/users/{user_id}").status_code == 404
        response = client.post("/api/auth/login", json={"email": "johndoe@example.com", "password": PASSWORD})
        assert response.status_code == 401

    def test_role_change_requires_admin(self, client, make_user, admin_headers):
        user_id, headers = make_user("johndoe")
        assert client.put(f"/api/users/{user_id}/role/admin", headers=headers).status_code == 403

        response = client.put(f"/api/users/{user_id}/role/superuser", headers=admin_headers)
        assert response.status_code == 400

        assert client.put(f"/api/users/{user_id}/role/editor", headers=admin_headers).status_code == 200
        assert client.get(f"/api/users/{user_id}").json()["role"] == "editor"


def test_health(client):
    assert client.get("/").json() == {"ok": True, "service": "movie-reviews"}
