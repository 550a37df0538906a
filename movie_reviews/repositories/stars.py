# ------------------------------------------------------------
# repositories/stars.py — 인물 CRUD + movie_stars(크레딧) 연결 테이블 저장소
# ------------------------------------------------------------

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..errors import Internal, NotFound
from ..models import MovieStar, Star, utcnow
from ..reconcile import apply_relations


@dataclass
class MovieCredit:
    star: Star
    role: str
    details: Optional[str] = None


class StarRepository:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create(self, star: Star) -> Star:
        try:
            with self.session_factory() as session, session.begin():
                session.add(star)
                session.flush()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return star

    def get_by_id(self, star_id: int) -> Star:
        try:
            with self.session_factory() as session:
                star = session.scalars(
                    select(Star).where(Star.id == star_id, Star.deleted_at.is_(None))
                ).first()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        if star is None:
            raise NotFound("star", "id", star_id)
        return star

    def get_all_paginated(self, offset: int, limit: int, movie_id: Optional[int] = None) -> Tuple[List[Star], int]:
        conditions = [Star.deleted_at.is_(None)]
        if movie_id is not None:
            # 한 인물이 여러 역할로 참여해도 한 번만 나오도록 서브쿼리로 제한
            conditions.append(Star.id.in_(select(MovieStar.star_id).where(MovieStar.movie_id == movie_id)))

        page_query = select(Star).where(*conditions).order_by(Star.id).offset(offset).limit(limit)
        count_query = select(func.count()).select_from(Star).where(*conditions)
        try:
            with self.session_factory() as session:
                stars = list(session.scalars(page_query))
                total = session.execute(count_query).scalar_one()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return stars, total

    def update(self, star: Star) -> None:
        try:
            with self.session_factory() as session, session.begin():
                result = session.execute(
                    update(Star)
                    .where(Star.id == star.id, Star.deleted_at.is_(None))
                    .values(
                        first_name=star.first_name,
                        middle_name=star.middle_name,
                        last_name=star.last_name,
                        birth_date=star.birth_date,
                        birth_place=star.birth_place,
                        death_date=star.death_date,
                        bio=star.bio,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise NotFound("star", "id", star.id)
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def delete(self, star_id: int) -> None:
        try:
            with self.session_factory() as session, session.begin():
                result = session.execute(
                    update(Star)
                    .where(Star.id == star_id, Star.deleted_at.is_(None))
                    .values(deleted_at=utcnow())
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise NotFound("star", "id", star_id)
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def get_missing_ids(self, star_ids: Sequence[int]) -> List[int]:
        if not star_ids:
            return []
        try:
            with self.session_factory() as session:
                found = set(session.scalars(
                    select(Star.id).where(Star.id.in_(set(star_ids)), Star.deleted_at.is_(None))
                ))
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return [sid for sid in star_ids if sid not in found]

    # -------------------------------
    # movie_stars 연결 테이블
    # -------------------------------

    def get_cast_by_movie_id(self, movie_id: int) -> List[MovieCredit]:
        """화면 표시용: 영화의 크레딧을 order_no 순서로 (인물 정보 포함)"""
        stmt = (
            select(Star, MovieStar.role, MovieStar.details)
            .join(MovieStar, MovieStar.star_id == Star.id)
            .where(MovieStar.movie_id == movie_id, Star.deleted_at.is_(None))
            .order_by(MovieStar.order_no)
        )
        try:
            with self.session_factory() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return [MovieCredit(star=star, role=role, details=details) for star, role, details in rows]

    def get_relations_by_movie_id(self, movie_id: int, session: Optional[Session] = None) -> List[MovieStar]:
        stmt = select(
            MovieStar.movie_id, MovieStar.star_id, MovieStar.role, MovieStar.details, MovieStar.order_no
        ).where(MovieStar.movie_id == movie_id)
        try:
            if session is not None:
                rows = session.execute(stmt).all()
            else:
                with self.session_factory() as own:
                    rows = own.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return [
            MovieStar(movie_id=r.movie_id, star_id=r.star_id, role=r.role, details=r.details, order_no=r.order_no)
            for r in rows
        ]

    def apply_relations(self, session: Session, current: Iterable[MovieStar], desired: Iterable[MovieStar]) -> None:
        def add(rel: MovieStar) -> None:
            session.execute(
                insert(MovieStar).values(
                    movie_id=rel.movie_id,
                    star_id=rel.star_id,
                    role=rel.role,
                    details=rel.details,
                    order_no=rel.order_no,
                )
            )

        def remove(rel: MovieStar) -> None:
            # 식별자에 role이 포함되므로 role까지 일치하는 행만 삭제
            session.execute(
                delete(MovieStar).where(
                    MovieStar.movie_id == rel.movie_id,
                    MovieStar.star_id == rel.star_id,
                    MovieStar.role == rel.role,
                )
            )

        apply_relations(current, desired, add, remove, key=MovieStar.state)
