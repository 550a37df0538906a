# ------------------------------------------------------------
# models.py — SQLAlchemy ORM 모델 정의
# (users / genres / stars / movies / movie_genres / movie_stars / reviews)
# ------------------------------------------------------------

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Computed,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects import mysql

from .db import Base

USER_ROLE = "user"
EDITOR_ROLE = "editor"
ADMIN_ROLE = "admin"
ROLES = (USER_ROLE, EDITOR_ROLE, ADMIN_ROLE)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


# ------------------------------
# User: 사용자 테이블
# ------------------------------
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(16), nullable=False)
    email = Column(String(127), nullable=False)
    pass_hash = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=USER_ROLE)
    bio = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    # soft delete: 행을 지우지 않고 삭제 시각만 기록
    deleted_at = Column(DateTime)

    # 제약 이름은 중복 에러 분류(db.is_unique_violation)에 사용
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
    )


# ------------------------------
# Genre: 장르 테이블 (이름은 대소문자 구분 UNIQUE)
# ------------------------------
class Genre(Base):
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, index=True)
    # MySQL 기본 collation은 대소문자를 구분하지 않으므로 utf8mb4_bin 지정
    name = Column(
        String(32).with_variant(mysql.VARCHAR(32, collation="utf8mb4_bin"), "mysql"),
        nullable=False,
    )

    __table_args__ = (UniqueConstraint("name", name="uq_genres_name"),)


# ------------------------------
# Star: 배우/감독 등 인물 테이블
# ------------------------------
class Star(Base):
    __tablename__ = "stars"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(50), nullable=False)
    middle_name = Column(String(50))
    last_name = Column(String(50), nullable=False)
    birth_date = Column(Date, nullable=False)
    birth_place = Column(String(100))
    death_date = Column(Date)
    bio = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    deleted_at = Column(DateTime)


# ------------------------------
# Movie: 영화 테이블
# ------------------------------
class Movie(Base):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    release_date = Column(Date, nullable=False)
    # 리뷰 평점 평균. 리뷰가 하나도 없으면 NULL
    avg_rating = Column(Float)
    description = Column(Text, nullable=False, default="")
    # 낙관적 동시성 제어용 버전 (수정 성공 시마다 +1)
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    deleted_at = Column(DateTime)

    # MySQL에서는 FULLTEXT 인덱스(MATCH ... AGAINST 검색용)
    __table_args__ = (
        Index("ix_movies_title_description", "title", "description", mysql_prefix="FULLTEXT"),
    )


# ------------------------------
# MovieGenre: 영화-장르 연결 테이블
# ------------------------------
class MovieGenre(Base):
    __tablename__ = "movie_genres"

    # 식별자: (movie_id, genre_id). order_no는 식별자에 포함되지 않음
    movie_id = Column(Integer, ForeignKey("movies.id"), primary_key=True)
    genre_id = Column(Integer, ForeignKey("genres.id"), primary_key=True)
    order_no = Column(Integer, nullable=False)

    def key(self):
        return self.movie_id, self.genre_id

    def state(self):
        # 식별자 + 순서까지 비교할 때 사용하는 키
        return self.movie_id, self.genre_id, self.order_no

    def __repr__(self):
        return f"<MovieGenre movie_id={self.movie_id} genre_id={self.genre_id} order_no={self.order_no}>"


# ------------------------------
# MovieStar: 영화-인물(크레딧) 연결 테이블
# ------------------------------
class MovieStar(Base):
    __tablename__ = "movie_stars"

    # 식별자: (movie_id, star_id, role)
    # 한 인물이 같은 영화에 여러 역할(actor, producer 등)로 참여할 수 있음
    movie_id = Column(Integer, ForeignKey("movies.id"), primary_key=True)
    star_id = Column(Integer, ForeignKey("stars.id"), primary_key=True)
    role = Column(String(32), primary_key=True)
    details = Column(Text)
    order_no = Column(Integer, nullable=False)

    def key(self):
        return self.movie_id, self.star_id, self.role

    def state(self):
        return self.movie_id, self.star_id, self.role, self.details, self.order_no

    def __repr__(self):
        return f"<MovieStar movie_id={self.movie_id} star_id={self.star_id} role={self.role}>"


# ------------------------------
# Review: 리뷰 테이블
# ------------------------------
class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    deleted_at = Column(DateTime)

    # 삭제되지 않은 리뷰는 1, 삭제된 리뷰는 NULL
    # UNIQUE 인덱스에서 NULL은 서로 충돌하지 않으므로
    # "삭제되지 않은 리뷰 중에서만" (movie_id, user_id) 유일성이 보장됨
    active = Column(
        Integer,
        Computed("CASE WHEN deleted_at IS NULL THEN 1 ELSE NULL END", persisted=True),
    )

    __table_args__ = (
        Index("uq_reviews_movie_user_active", "movie_id", "user_id", "active", unique=True),
    )
