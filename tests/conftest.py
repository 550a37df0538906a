import pytest
from fastapi.testclient import TestClient

from movie_reviews.config import AdminConfig, PaginationConfig, Settings
from movie_reviews.main import create_app

PASSWORD = "Passw0rd!"
ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def settings(tmp_path):
    # 테스트마다 새 SQLite 파일 DB
    return Settings(
        database_url=f"sqlite:///{tmp_path}/test.db",
        jwt_secret="test-secret",
        admin=AdminConfig(username="admin", email=ADMIN_EMAIL, password=PASSWORD),
        pagination=PaginationConfig(default_size=2, max_size=5),
        log_level="warning",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def services(app):
    return app.state.services


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def login(client, email, password=PASSWORD):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


@pytest.fixture
def admin_headers(client):
    return bearer(login(client, ADMIN_EMAIL))


@pytest.fixture
def make_user(client, admin_headers):
    """
    사용자 등록 + 로그인 헬퍼.
    반환: (user_id, 인증 헤더)
    """
    def _make(username, role="user"):
        email = f"{username}@example.com"
        response = client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": PASSWORD},
        )
        assert response.status_code == 201, response.text
        user_id = response.json()["id"]
        if role != "user":
            response = client.put(f"/api/users/{user_id}/role/{role}", headers=admin_headers)
            assert response.status_code == 200, response.text
        return user_id, bearer(login(client, email))

    return _make


@pytest.fixture
def editor_headers(make_user):
    _, headers = make_user("editor1", role="editor")
    return headers
