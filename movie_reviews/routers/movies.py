# ---------------------------------------------
# movies.py — 영화 목록/상세/생성/수정/삭제 엔드포인트
# ---------------------------------------------

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from .. import pagination
from ..models import Movie
from ..repositories import CreditInfo
from ..schemas import (
    GenreOut,
    MovieCreateIn,
    MovieCreditOut,
    MovieDetailsOut,
    MovieOut,
    MoviePageOut,
    MovieUpdateIn,
)
from ..security import require_editor
from ..services import MovieDetails, Services, get_services
from . import shared_get

router = APIRouter(prefix="/api/movies", tags=["movies"])


def _details_out(details: MovieDetails) -> MovieDetailsOut:
    out = MovieDetailsOut.model_validate(details.movie)
    return out.model_copy(update={
        "genres": [GenreOut.model_validate(g) for g in details.genres],
        "cast": [MovieCreditOut.model_validate(c) for c in details.cast],
    })


def _credits(payload: MovieCreateIn):
    return [CreditInfo(star_id=c.star_id, role=c.role, details=c.details) for c in payload.cast]


@router.get("", response_model=MoviePageOut)
def list_movies(
    request: Request,
    page: Optional[int] = None,
    size: Optional[int] = None,
    q: Optional[str] = None,
    sort_by_rating: Optional[str] = Query(None, alias="sortByRating", pattern="^(asc|desc)$"),
    star_id: Optional[int] = Query(None, alias="starId"),
    services: Services = Depends(get_services),
):
    """
    영화 목록을 페이지네이션과 함께 반환합니다.

    - Query Params:
      - page, size: 1부터 시작하는 페이지 번호 / 페이지 크기
      - q: 제목/설명 검색어 (관련도 순 정렬)
      - sortByRating: asc | desc (평균 평점 순 정렬)
      - starId: 해당 인물이 참여한 영화만
    """
    page, size = pagination.set_defaults(page, size, services.settings.pagination)
    offset, limit = pagination.offset_limit(page, size)

    def fetch():
        movies, total = services.movies.get_movies_paginated(
            offset, limit, search_term=q, sort_by_rating=sort_by_rating, star_id=star_id
        )
        return pagination.response(page, size, total, [MovieOut.model_validate(m) for m in movies])

    return shared_get(request, services, fetch)


@router.get("/{movie_id}", response_model=MovieDetailsOut)
def get_movie(movie_id: int, request: Request, services: Services = Depends(get_services)):
    """영화 상세: 장르(표시 순서)와 크레딧(표시 순서) 포함"""
    return shared_get(request, services, lambda: _details_out(services.movies.get_movie_by_id(movie_id)))


@router.post("", response_model=MovieDetailsOut, status_code=201, dependencies=[Depends(require_editor)])
def create_movie(payload: MovieCreateIn, services: Services = Depends(get_services)):
    """
    영화를 생성합니다. (editor / admin)
    - genre_ids, cast 목록의 순서가 그대로 표시 순서가 됩니다.
    - 존재하지 않는 장르/인물 id가 있으면 404
    """
    movie = Movie(title=payload.title, release_date=payload.release_date, description=payload.description)
    details = services.movies.create_movie(movie, payload.genre_ids, _credits(payload))
    return _details_out(details)


@router.put("/{movie_id}", dependencies=[Depends(require_editor)])
def update_movie(movie_id: int, payload: MovieUpdateIn, services: Services = Depends(get_services)):
    """
    영화를 수정합니다. (editor / admin)
    - version은 클라이언트가 마지막으로 읽은 값이어야 하며, 다르면 409
    - 장르/크레딧은 요청 목록 전체로 교체됩니다.
    """
    movie = Movie(
        id=movie_id,
        title=payload.title,
        release_date=payload.release_date,
        description=payload.description,
        version=payload.version,
    )
    services.movies.update_movie(movie, payload.genre_ids, _credits(payload))


@router.delete("/{movie_id}", dependencies=[Depends(require_editor)])
def delete_movie(movie_id: int, services: Services = Depends(get_services)):
    services.movies.delete_movie(movie_id)
