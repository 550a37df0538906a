# ------------------------------------------------------------
# reviews.py — 리뷰 서비스 (작성/수정/삭제 로그, 평점 재계산은 저장소 트랜잭션에서)
# ------------------------------------------------------------

from typing import List, Optional, Tuple

from ..logger import get_logger
from ..models import Review
from ..repositories import ReviewRepository

logger = get_logger()


class ReviewService:
    def __init__(self, repo: ReviewRepository):
        self.repo = repo

    def get_reviews_paginated(
        self,
        offset: int,
        limit: int,
        movie_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> Tuple[List[Review], int]:
        return self.repo.get_all_paginated(offset, limit, movie_id=movie_id, user_id=user_id)

    def get_review_by_id(self, review_id: int) -> Review:
        return self.repo.get_by_id(review_id)

    def create_review(self, review: Review) -> Review:
        review = self.repo.create(review)
        logger.info(
            f"review created: id={review.id} movie_id={review.movie_id} "
            f"user_id={review.user_id} rating={review.rating}"
        )
        return review

    def update_review(self, review_id: int, user_id: int, title: str, content: str, rating: int) -> None:
        self.repo.update(review_id, user_id, title, content, rating)
        logger.info(f"review updated: id={review_id} user_id={user_id} rating={rating}")

    def delete_review(self, review_id: int, user_id: int) -> None:
        self.repo.delete(review_id, user_id)
        logger.info(f"review deleted: id={review_id} user_id={user_id}")
