# -----------------------------------------------------------
# reviews.py — 리뷰 조회 및 사용자별 리뷰 작성/수정/삭제 엔드포인트
# -----------------------------------------------------------

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from .. import pagination
from ..errors import BadRequest
from ..models import Review
from ..schemas import ReviewCreateIn, ReviewOut, ReviewPageOut, ReviewUpdateIn
from ..security import require_self
from ..services import Services, get_services
from . import shared_get

# 조회는 /api/reviews, 작성/수정/삭제는 /api/users/{user_id}/reviews
router = APIRouter(prefix="/api", tags=["reviews"])


@router.get("/reviews", response_model=ReviewPageOut)
def list_reviews(
    request: Request,
    page: Optional[int] = None,
    size: Optional[int] = None,
    movie_id: Optional[int] = Query(None, alias="movieId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    services: Services = Depends(get_services),
):
    """
    리뷰 목록 (페이지네이션)
    - movieId 또는 userId 중 하나는 반드시 필요
    """
    if movie_id is None and user_id is None:
        raise BadRequest("either movie_id or user_id must be provided")

    page, size = pagination.set_defaults(page, size, services.settings.pagination)
    offset, limit = pagination.offset_limit(page, size)

    def fetch():
        reviews, total = services.reviews.get_reviews_paginated(offset, limit, movie_id=movie_id, user_id=user_id)
        return pagination.response(page, size, total, [ReviewOut.model_validate(r) for r in reviews])

    return shared_get(request, services, fetch)


@router.get("/reviews/{review_id}", response_model=ReviewOut)
def get_review(review_id: int, request: Request, services: Services = Depends(get_services)):
    return shared_get(
        request, services, lambda: ReviewOut.model_validate(services.reviews.get_review_by_id(review_id))
    )


@router.post(
    "/users/{user_id}/reviews",
    response_model=ReviewOut,
    status_code=201,
    dependencies=[Depends(require_self)],
)
def create_review(user_id: int, payload: ReviewCreateIn, services: Services = Depends(get_services)):
    """
    리뷰를 작성합니다. (본인 또는 admin)
    - 같은 영화에 대해 사용자당 하나의 리뷰만 가능 (중복이면 409)
    - 작성 후 영화의 평균 평점이 같은 트랜잭션에서 다시 계산됩니다.

    요청 바디(JSON) 예:
    {
      "movie_id": 3,
      "title": "Great",
      "content": "Loved it",
      "rating": 9
    }
    """
    review = Review(
        movie_id=payload.movie_id,
        user_id=user_id,
        title=payload.title,
        content=payload.content,
        rating=payload.rating,
    )
    return services.reviews.create_review(review)


@router.put("/users/{user_id}/reviews/{review_id}", dependencies=[Depends(require_self)])
def update_review(
    user_id: int,
    review_id: int,
    payload: ReviewUpdateIn,
    services: Services = Depends(get_services),
):
    services.reviews.update_review(review_id, user_id, payload.title, payload.content, payload.rating)


@router.delete("/users/{user_id}/reviews/{review_id}", dependencies=[Depends(require_self)])
def delete_review(user_id: int, review_id: int, services: Services = Depends(get_services)):
    services.reviews.delete_review(review_id, user_id)
