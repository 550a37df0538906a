# ------------------------------------------------------------
# security.py — 비밀번호 해시, JWT 액세스 토큰, 권한 의존성
# ------------------------------------------------------------

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import Forbidden, Unauthorized
from .models import ADMIN_ROLE, EDITOR_ROLE

_ALGORITHM = "HS256"

# Authorization 헤더가 없어도 401을 바로 던지지 않고, 정책 의존성에서 판단
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


@dataclass(frozen=True)
class AccessClaims:
    user_id: int
    role: str


class JwtService:
    def __init__(self, secret: str, access_expiration_minutes: int):
        self.secret = secret
        self.access_expiration = timedelta(minutes=access_expiration_minutes)

    def generate_token(self, user_id: int, role: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "role": role,
            "iat": now,
            "exp": now + self.access_expiration,
        }
        return jwt.encode(payload, self.secret, algorithm=_ALGORITHM)

    def parse_token(self, token: str) -> Optional[AccessClaims]:
        # 만료/서명 오류 등은 "토큰 없음"과 동일하게 취급
        try:
            payload = jwt.decode(token, self.secret, algorithms=[_ALGORITHM])
            return AccessClaims(user_id=int(payload["sub"]), role=payload["role"])
        except (jwt.PyJWTError, KeyError, ValueError):
            return None


# -------------------------------
# FastAPI 의존성
# -------------------------------

def get_claims(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AccessClaims]:
    if credentials is None:
        return None
    return request.app.state.services.jwt.parse_token(credentials.credentials)


def _require_claims(claims: Optional[AccessClaims]) -> AccessClaims:
    if claims is None:
        raise Unauthorized("invalid or missing token")
    return claims


def require_self(user_id: int, claims: Optional[AccessClaims] = Depends(get_claims)) -> AccessClaims:
    """경로의 {user_id}가 토큰 사용자와 같거나 관리자일 때만 통과"""
    claims = _require_claims(claims)
    if claims.role == ADMIN_ROLE or claims.user_id == user_id:
        return claims
    raise Forbidden("insufficient permissions")


def require_editor(claims: Optional[AccessClaims] = Depends(get_claims)) -> AccessClaims:
    claims = _require_claims(claims)
    if claims.role in (EDITOR_ROLE, ADMIN_ROLE):
        return claims
    raise Forbidden("insufficient permissions")


def require_admin(claims: Optional[AccessClaims] = Depends(get_claims)) -> AccessClaims:
    claims = _require_claims(claims)
    if claims.role == ADMIN_ROLE:
        return claims
    raise Forbidden("insufficient permissions")
