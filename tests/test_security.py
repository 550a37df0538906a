import pytest

from movie_reviews.errors import Forbidden, Unauthorized
from movie_reviews.security import (
    AccessClaims,
    JwtService,
    check_password,
    hash_password,
    require_admin,
    require_editor,
    require_self,
)


def test_password_hash_roundtrip():
    hashed = hash_password("Passw0rd!")
    assert hashed != "Passw0rd!"
    assert check_password("Passw0rd!", hashed)
    assert not check_password("wrong", hashed)


class TestJwtService:
    def test_token_carries_user_and_role(self):
        jwt_service = JwtService("secret", 15)
        claims = jwt_service.parse_token(jwt_service.generate_token(42, "editor"))
        assert claims == AccessClaims(user_id=42, role="editor")

    def test_wrong_secret_is_rejected(self):
        token = JwtService("secret", 15).generate_token(1, "user")
        assert JwtService("other", 15).parse_token(token) is None

    def test_expired_token_is_rejected(self):
        jwt_service = JwtService("secret", -1)
        assert jwt_service.parse_token(jwt_service.generate_token(1, "user")) is None

    def test_garbage_is_rejected(self):
        assert JwtService("secret", 15).parse_token("not-a-token") is None


class TestPolicies:
    def test_missing_claims(self):
        for check in (lambda: require_self(1, None), lambda: require_editor(None), lambda: require_admin(None)):
            with pytest.raises(Unauthorized):
                check()

    def test_self(self):
        assert require_self(5, AccessClaims(5, "user")).user_id == 5
        assert require_self(5, AccessClaims(1, "admin")).user_id == 1
        with pytest.raises(Forbidden):
            require_self(5, AccessClaims(6, "editor"))

    def test_editor(self):
        require_editor(AccessClaims(1, "editor"))
        require_editor(AccessClaims(1, "admin"))
        with pytest.raises(Forbidden):
            require_editor(AccessClaims(1, "user"))

    def test_admin(self):
        require_admin(AccessClaims(1, "admin"))
        with pytest.raises(Forbidden):
            require_admin(AccessClaims(1, "editor"))
