# ------------------------------------------------------------
# repositories/movies.py — 영화 애그리거트 저장소
# ------------------------------------------------------------
# - 영화 행 + 장르/크레딧 연결 행을 하나의 트랜잭션으로 생성/수정/삭제
# - 수정은 version 컬럼을 이용한 낙관적 동시성 제어
# - lock(): 리뷰 저장소가 평점 재계산 전에 잡는 영화 행 잠금(SELECT ... FOR UPDATE)

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects.mysql import match
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..db import is_foreign_key_violation, is_mysql
from ..errors import AppError, Internal, NotFound, VersionMismatch
from ..models import Movie, MovieGenre, MovieStar, utcnow
from .genres import GenreRepository
from .stars import StarRepository


@dataclass
class CreditInfo:
    star_id: int
    role: str
    details: Optional[str] = None


def genre_relations(movie_id: int, genre_ids: Sequence[int]) -> List[MovieGenre]:
    # 요청 순서가 곧 order_no. 같은 장르가 반복되면 첫 번째만 사용
    relations, seen = [], set()
    for genre_id in genre_ids:
        if genre_id in seen:
            continue
        seen.add(genre_id)
        relations.append(MovieGenre(movie_id=movie_id, genre_id=genre_id, order_no=len(relations)))
    return relations


def cast_relations(movie_id: int, cast: Sequence[CreditInfo]) -> List[MovieStar]:
    relations, seen = [], set()
    for credit in cast:
        key = (credit.star_id, credit.role)
        if key in seen:
            continue
        seen.add(key)
        relations.append(
            MovieStar(
                movie_id=movie_id,
                star_id=credit.star_id,
                role=credit.role,
                details=credit.details,
                order_no=len(relations),
            )
        )
    return relations


class MovieRepository:
    def __init__(self, session_factory: sessionmaker, genres: GenreRepository, stars: StarRepository):
        self.session_factory = session_factory
        self.genres = genres
        self.stars = stars

    def create(self, movie: Movie, genre_ids: Sequence[int], cast: Sequence[CreditInfo]) -> Movie:
        """영화 행 INSERT 후 같은 트랜잭션에서 장르/크레딧을 빈 목록 → 요청 목록으로 reconcile"""
        try:
            with self.session_factory() as session, session.begin():
                session.add(movie)
                session.flush()  # id / created_at / version 할당
                self.genres.apply_relations(session, [], genre_relations(movie.id, genre_ids))
                self.stars.apply_relations(session, [], cast_relations(movie.id, cast))
        except IntegrityError as exc:
            raise self._reference_error(exc, genre_ids, cast) from exc
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return movie

    def get_by_id(self, movie_id: int, session: Optional[Session] = None) -> Movie:
        stmt = select(Movie).where(Movie.id == movie_id, Movie.deleted_at.is_(None))
        try:
            if session is not None:
                movie = session.scalars(stmt).first()
            else:
                with self.session_factory() as own:
                    movie = own.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        if movie is None:
            raise NotFound("movie", "id", movie_id)
        return movie

    def get_all_paginated(
        self,
        offset: int,
        limit: int,
        search_term: Optional[str] = None,
        sort_by_rating: Optional[str] = None,
        star_id: Optional[int] = None,
    ) -> Tuple[List[Movie], int]:
        """
        페이지 + 전체 개수. 두 쿼리는 같은 필터 조건을 공유하고 한 세션에서 연달아 실행한다.
        (동시 쓰기 중에는 페이지와 total 사이에 약간의 차이가 있을 수 있음)
        """
        try:
            with self.session_factory() as session:
                conditions = [Movie.deleted_at.is_(None)]
                order_by = []

                if star_id is not None:
                    conditions.append(Movie.id.in_(select(MovieStar.movie_id).where(MovieStar.star_id == star_id)))

                if search_term:
                    if is_mysql(session):
                        # FULLTEXT 인덱스 기반 자연어 검색 + 관련도 정렬
                        relevance = match(Movie.title, Movie.description, against=search_term).in_natural_language_mode()
                        conditions.append(relevance)
                        order_by.append(relevance.desc())
                    else:
                        pattern = f"%{search_term}%"
                        conditions.append(or_(Movie.title.ilike(pattern), Movie.description.ilike(pattern)))

                if sort_by_rating == "asc":
                    order_by.append(Movie.avg_rating.asc())
                elif sort_by_rating == "desc":
                    order_by.append(Movie.avg_rating.desc())
                order_by.append(Movie.id)

                page_query = select(Movie).where(*conditions).order_by(*order_by).offset(offset).limit(limit)
                count_query = select(func.count()).select_from(Movie).where(*conditions)

                movies = list(session.scalars(page_query))
                total = session.execute(count_query).scalar_one()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return movies, total

    def update(
        self,
        movie: Movie,
        genre_ids: Sequence[int],
        cast: Sequence[CreditInfo],
    ) -> None:
        """
        WHERE 절에 id와 호출자가 보낸 version을 함께 걸고, 성공하면 version + 1.
        영향받은 행이 0이면 재조회해서 NotFound / VersionMismatch를 구분한다.
        """
        try:
            with self.session_factory() as session, session.begin():
                result = session.execute(
                    update(Movie)
                    .where(
                        Movie.id == movie.id,
                        Movie.version == movie.version,
                        Movie.deleted_at.is_(None),
                    )
                    .values(
                        title=movie.title,
                        release_date=movie.release_date,
                        description=movie.description,
                        version=Movie.version + 1,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    self.get_by_id(movie.id, session=session)
                    raise VersionMismatch("movie", "id", movie.id, movie.version)

                # 현재 DB 상태 전체 → 요청 전체로 reconcile
                current_genres = self.genres.get_relations_by_movie_id(movie.id, session=session)
                self.genres.apply_relations(session, current_genres, genre_relations(movie.id, genre_ids))
                current_cast = self.stars.get_relations_by_movie_id(movie.id, session=session)
                self.stars.apply_relations(session, current_cast, cast_relations(movie.id, cast))
        except IntegrityError as exc:
            raise self._reference_error(exc, genre_ids, cast) from exc
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        movie.version += 1

    def delete(self, movie_id: int) -> None:
        """soft delete + 장르/크레딧 연결 행 전부 제거"""
        try:
            with self.session_factory() as session, session.begin():
                result = session.execute(
                    update(Movie)
                    .where(Movie.id == movie_id, Movie.deleted_at.is_(None))
                    .values(deleted_at=utcnow())
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise NotFound("movie", "id", movie_id)

                current_genres = self.genres.get_relations_by_movie_id(movie_id, session=session)
                self.genres.apply_relations(session, current_genres, [])
                current_cast = self.stars.get_relations_by_movie_id(movie_id, session=session)
                self.stars.apply_relations(session, current_cast, [])
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def _reference_error(
        self, exc: IntegrityError, genre_ids: Sequence[int], cast: Sequence[CreditInfo]
    ) -> AppError:
        # 사전 검사 이후 삭제된 장르/인물 때문에 연결 행 INSERT가 FK 위반으로 실패한 경우
        if is_foreign_key_violation(exc):
            missing = self.genres.get_missing_ids(genre_ids)
            if missing:
                return NotFound("genre", "id", missing[0])
            missing = self.stars.get_missing_ids([c.star_id for c in cast])
            if missing:
                return NotFound("star", "id", missing[0])
        return Internal(exc)

    def lock(self, session: Session, movie_id: int) -> None:
        """
        삭제되지 않은 영화 행에 배타 잠금(SELECT ... FOR UPDATE).
        잠금은 session의 트랜잭션이 끝날 때까지 유지된다.
        영화가 없으면 NotFound → 호출자의 트랜잭션이 롤백된다.
        """
        try:
            row = session.execute(
                select(Movie.id).where(Movie.id == movie_id, Movie.deleted_at.is_(None)).with_for_update()
            ).first()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        if row is None:
            raise NotFound("movie", "id", movie_id)
