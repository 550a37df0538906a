# ------------------------------------------------------------
# repositories/reviews.py — 리뷰 저장소 + 영화 평균 평점 재계산
# ------------------------------------------------------------
# 불변식: movies.avg_rating == 삭제되지 않은 리뷰 rating의 평균 (리뷰가 없으면 NULL)
# 리뷰를 생성/수정/삭제하는 모든 트랜잭션은
#   1) 부모 영화 행을 잠그고 (MovieRepository.lock)
#   2) 리뷰 행을 변경한 뒤
#   3) 같은 트랜잭션에서 평균 평점을 다시 계산한다.

from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..db import is_foreign_key_violation, is_unique_violation
from ..errors import AlreadyExists, Forbidden, Internal, NotFound
from ..models import Movie, Review, utcnow
from .movies import MovieRepository


class ReviewRepository:
    def __init__(self, session_factory: sessionmaker, movies: MovieRepository):
        self.session_factory = session_factory
        self.movies = movies

    def create(self, review: Review) -> Review:
        try:
            with self.session_factory() as session, session.begin():
                # 영화가 중간에 삭제되는 경우를 막기 위해 INSERT 전에 잠금
                self.movies.lock(session, review.movie_id)
                session.add(review)
                try:
                    session.flush()
                except IntegrityError as exc:
                    if is_unique_violation(exc):
                        raise AlreadyExists(
                            "review", "(movie_id,user_id)", f"({review.movie_id},{review.user_id})"
                        ) from exc
                    if is_foreign_key_violation(exc):
                        # 영화는 잠금으로 확인했으므로 남은 참조는 사용자
                        raise NotFound("user", "id", review.user_id) from exc
                    raise
                self._recalculate_movie_rating(session, review.movie_id)
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return review

    def get_by_id(self, review_id: int, session: Optional[Session] = None) -> Review:
        stmt = select(Review).where(Review.id == review_id, Review.deleted_at.is_(None))
        try:
            if session is not None:
                review = session.scalars(stmt).first()
            else:
                with self.session_factory() as own:
                    review = own.scalars(stmt).first()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        if review is None:
            raise NotFound("review", "id", review_id)
        return review

    def get_all_paginated(
        self,
        offset: int,
        limit: int,
        movie_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Tuple[List[Review], int]:
        conditions = [Review.deleted_at.is_(None)]
        if movie_id is not None:
            conditions.append(Review.movie_id == movie_id)
        if user_id is not None:
            conditions.append(Review.user_id == user_id)

        page_query = select(Review).where(*conditions).order_by(Review.id).offset(offset).limit(limit)
        count_query = select(func.count()).select_from(Review).where(*conditions)
        try:
            with self.session_factory() as session:
                reviews = list(session.scalars(page_query))
                total = session.execute(count_query).scalar_one()
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc
        return reviews, total

    def update(self, review_id: int, user_id: int, title: str, content: str, rating: int) -> None:
        # 어느 영화를 잠글지 알기 위해 먼저 조회
        review = self.get_by_id(review_id)
        try:
            with self.session_factory() as session, session.begin():
                self.movies.lock(session, review.movie_id)
                # 소유권 검사는 WHERE 절에서 (검사 후 실행 사이의 경쟁 조건 방지)
                result = session.execute(
                    update(Review)
                    .where(
                        Review.id == review_id,
                        Review.user_id == user_id,
                        Review.deleted_at.is_(None),
                    )
                    .values(title=title, content=content, rating=rating)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise self._specify_modification_error(session, review_id, user_id)
                self._recalculate_movie_rating(session, review.movie_id)
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def delete(self, review_id: int, user_id: int) -> None:
        review = self.get_by_id(review_id)
        try:
            with self.session_factory() as session, session.begin():
                self.movies.lock(session, review.movie_id)
                result = session.execute(
                    update(Review)
                    .where(
                        Review.id == review_id,
                        Review.user_id == user_id,
                        Review.deleted_at.is_(None),
                    )
                    .values(deleted_at=utcnow())
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise self._specify_modification_error(session, review_id, user_id)
                self._recalculate_movie_rating(session, review.movie_id)
        except SQLAlchemyError as exc:
            raise Internal(exc) from exc

    def _specify_modification_error(self, session: Session, review_id: int, user_id: int) -> Exception:
        """
        id + user_id 조건으로 변경된 행이 없을 때 원인을 구분한다.
        1. id의 리뷰가 없음                → NotFound
        2. 리뷰는 있지만 다른 사용자 소유  → Forbidden (실제 소유자 id 포함)
        3. 그 외                           → Internal (도달하면 안 되는 경로)
        """
        try:
            review = self.get_by_id(review_id, session=session)
        except NotFound as exc:
            return exc
        if review.user_id != user_id:
            return Forbidden(f"review with id {review_id} is not owned by user with id {review.user_id}")
        return Internal(message=f"unexpected error modifying review with id {review_id}")

    def _recalculate_movie_rating(self, session: Session, movie_id: int) -> None:
        avg_rating = (
            select(func.avg(Review.rating))
            .where(Review.movie_id == movie_id, Review.deleted_at.is_(None))
            .scalar_subquery()
        )
        result = session.execute(
            update(Movie)
            .where(Movie.id == movie_id)
            .values(avg_rating=avg_rating)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFound("movie", "id", movie_id)
