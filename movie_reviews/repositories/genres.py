# ------------------------------------------------------------
# repositories/genres.py — 장르 CRUD + movie_genres 연결 테이블 저장소
# ------------------------------------------------------------

from typing import Iterable, List, Optional, Sequence

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..db import is_unique_violation
from ..errors import AlreadyExists, Internal, NotFound
from ..models import Genre, MovieGenre
from ..reconcile import apply_relations


class GenreRepository:
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get_all(self) -> List[Genre]:
        try:
            with self.session_factory() as session:
                return list(session.scalars(select(Genre).order_by(Genre.id)))
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def get_by_id(self, genre_id: int) -> Genre:
        try:
            with self.session_factory() as session:
                genre = session.get(Genre, genre_id)
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        if genre is None:
            raise NotFound("genre", "id", genre_id)
        return genre

    def create(self, name: str) -> Genre:
        genre = Genre(name=name)
        try:
            with self.session_factory() as session, session.begin():
                session.add(genre)
                session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc, "uq_genres_name", "genres.name"):
                raise AlreadyExists("genre", "name", name) from exc
            raise Internal(exc) from exc
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return genre

    def update(self, genre_id: int, name: str) -> None:
        try:
            with self.session_factory() as session, session.begin():
                result = session.execute(
                    update(Genre).where(Genre.id == genre_id).values(name=name)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise NotFound("genre", "id", genre_id)
        except IntegrityError as exc:
            if is_unique_violation(exc, "uq_genres_name", "genres.name"):
                raise AlreadyExists("genre", "name", name) from exc
            raise Internal(exc) from exc
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def delete(self, genre_id: int) -> None:
        # 장르는 soft delete 대상이 아니므로 연결 행과 함께 실제로 삭제
        try:
            with self.session_factory() as session, session.begin():
                session.execute(delete(MovieGenre).where(MovieGenre.genre_id == genre_id))
                result = session.execute(delete(Genre).where(Genre.id == genre_id))
                if result.rowcount == 0:
                    raise NotFound("genre", "id", genre_id)
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def get_missing_ids(self, genre_ids: Sequence[int]) -> List[int]:
        """주어진 id 중 존재하지 않는 장르 id 목록 (입력 순서 유지)"""
        if not genre_ids:
            return []
        try:
            with self.session_factory() as session:
                found = set(session.scalars(select(Genre.id).where(Genre.id.in_(set(genre_ids)))))
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return [gid for gid in genre_ids if gid not in found]

    # -------------------------------
    # movie_genres 연결 테이블
    # -------------------------------

    def get_by_movie_id(self, movie_id: int) -> List[Genre]:
        """화면 표시용: 영화의 장르를 order_no 순서로"""
        try:
            with self.session_factory() as session:
                stmt = (
                    select(Genre)
                    .join(MovieGenre, MovieGenre.genre_id == Genre.id)
                    .where(MovieGenre.movie_id == movie_id)
                    .order_by(MovieGenre.order_no)
                )
                return list(session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def get_relations_by_movie_id(self, movie_id: int, session: Optional[Session] = None) -> List[MovieGenre]:
        """
        reconcile 입력용 현재 연결 행.
        session을 넘기면 진행 중인 트랜잭션 안에서 읽는다(같은 트랜잭션의 미커밋 쓰기 포함).
        """
        stmt = select(MovieGenre.movie_id, MovieGenre.genre_id, MovieGenre.order_no).where(
            MovieGenre.movie_id == movie_id
        )
        try:
            if session is not None:
                rows = session.execute(stmt).all()
            else:
                with self.session_factory() as own:
                    rows = own.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        # 세션에 붙지 않은(transient) 객체로 반환: 삭제/추가는 Core 문으로 수행
        return [MovieGenre(movie_id=r.movie_id, genre_id=r.genre_id, order_no=r.order_no) for r in rows]

    def apply_relations(self, session: Session, current: Iterable[MovieGenre], desired: Iterable[MovieGenre]) -> None:
        def add(rel: MovieGenre) -> None:
            session.execute(
                insert(MovieGenre).values(movie_id=rel.movie_id, genre_id=rel.genre_id, order_no=rel.order_no)
            )

        def remove(rel: MovieGenre) -> None:
            session.execute(
                delete(MovieGenre).where(MovieGenre.movie_id == rel.movie_id, MovieGenre.genre_id == rel.genre_id)
            )

        # order_no까지 비교: 순서만 바뀐 행도 삭제 후 다시 추가
        apply_relations(current, desired, add, remove, key=MovieGenre.state)
