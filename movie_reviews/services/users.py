# ------------------------------------------------------------
# users.py — 사용자 프로필 서비스 + 회원가입/로그인/초기 관리자 생성
# ------------------------------------------------------------

from typing import Optional

from ..config import AdminConfig
from ..errors import AlreadyExists, NotFound, Unauthorized
from ..logger import get_logger
from ..models import ADMIN_ROLE, USER_ROLE, User
from ..repositories import UserRepository
from ..security import JwtService, check_password, hash_password

logger = get_logger()


class UserService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    def get_user_by_id(self, user_id: int) -> User:
        return self.repo.get_by_id(user_id)

    def get_user_by_username(self, username: str) -> User:
        return self.repo.get_by_username(username)

    def update_bio(self, user_id: int, bio: Optional[str]) -> None:
        self.repo.update_bio(user_id, bio)
        logger.info(f"user bio updated: id={user_id}")

    def update_role(self, user_id: int, role: str) -> None:
        self.repo.update_role(user_id, role)
        logger.info(f"user role updated: id={user_id} role={role}")

    def delete_user(self, user_id: int) -> None:
        self.repo.delete(user_id)
        logger.info(f"user deleted: id={user_id}")


class AuthService:
    def __init__(self, repo: UserRepository, jwt_service: JwtService):
        self.repo = repo
        self.jwt = jwt_service

    def register(self, username: str, email: str, password: str, role: str = USER_ROLE) -> User:
        user = User(username=username, email=email, pass_hash=hash_password(password), role=role)
        user = self.repo.create(user)
        logger.info(f"user registered: id={user.id} username={user.username} role={user.role}")
        return user

    def login(self, email: str, password: str) -> str:
        # 이메일이 없거나 비밀번호가 틀려도 같은 메시지
        try:
            user = self.repo.get_by_email(email)
        except NotFound as exc:
            raise Unauthorized("invalid email or password") from exc
        if not check_password(password, user.pass_hash):
            raise Unauthorized("invalid email or password")
        logger.info(f"user logged in: id={user.id}")
        return self.jwt.generate_token(user.id, user.role)

    def create_admin(self, admin: AdminConfig) -> None:
        """설정에 관리자 계정이 있으면 시작 시 생성 (이미 있으면 무시)"""
        if not admin.is_set():
            return
        try:
            self.register(admin.username, admin.email, admin.password, role=ADMIN_ROLE)
        except AlreadyExists as exc:
            logger.info(f"admin user already exists: {exc.message}")
