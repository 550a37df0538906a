# ------------------------------------------------------------
# repositories/users.py — 사용자 저장소
# ------------------------------------------------------------

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..db import is_unique_violation
from ..errors import AlreadyExists, Internal, NotFound
from ..models import User, utcnow


class UserRepository:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create(self, user: User) -> User:
        try:
            with self.session_factory() as session, session.begin():
                session.add(user)
                session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc, "uq_users_email", "users.email"):
                raise AlreadyExists("user", "email", user.email) from exc
            if is_unique_violation(exc, "uq_users_username", "users.username"):
                raise AlreadyExists("user", "username", user.username) from exc
            raise Internal(exc) from exc
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return user

    def _get_one(self, *conditions):
        try:
            with self.session_factory() as session:
                return session.scalars(select(User).where(*conditions, User.deleted_at.is_(None))).first()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def get_by_id(self, user_id: int) -> User:
        user = self._get_one(User.id == user_id)
        if user is None:
            raise NotFound("user", "id", user_id)
        return user

    def get_by_username(self, username: str) -> User:
        user = self._get_one(User.username == username)
        if user is None:
            raise NotFound("user", "username", username)
        return user

    def get_by_email(self, email: str) -> User:
        # 비밀번호 해시까지 포함한 사용자 (로그인 검증용)
        user = self._get_one(User.email == email)
        if user is None:
            raise NotFound("user", "email", email)
        return user

    def _update(self, user_id: int, **values) -> None:
        try:
            with self.session_factory() as session, session.begin():
                result = session.execute(
                    update(User)
                    .where(User.id == user_id, User.deleted_at.is_(None))
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise NotFound("user", "id", user_id)
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def update_bio(self, user_id: int, bio) -> None:
        self._update(user_id, bio=bio)

    def update_role(self, user_id: int, role: str) -> None:
        self._update(user_id, role=role)

    def delete(self, user_id: int) -> None:
        self._update(user_id, deleted_at=utcnow())
