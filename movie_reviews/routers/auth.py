# -----------------------------------------------------------
# auth.py — 회원가입 / 로그인(JWT 발급) 엔드포인트
# -----------------------------------------------------------

from fastapi import APIRouter, Depends

from ..schemas import LoginIn, RegisterIn, TokenOut, UserOut
from ..services import Services, get_services

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, services: Services = Depends(get_services)):
    """
    회원가입. 새 사용자의 권한은 항상 user
    - username(5~16자) / email 중복이면 409
    - 비밀번호: 8자 이상, 소문자/대문자/숫자/특수문자 각각 1개 이상
    """
    return services.auth.register(payload.username, payload.email, payload.password)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, services: Services = Depends(get_services)):
    """이메일/비밀번호가 맞으면 액세스 토큰(JWT)을 발급합니다."""
    return TokenOut(access_token=services.auth.login(payload.email, payload.password))
