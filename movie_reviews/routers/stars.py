# ---------------------------------------------
# stars.py — 인물(배우/감독 등) CRUD 엔드포인트
# ---------------------------------------------

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from .. import pagination
from ..models import Star
from ..schemas import StarDetailsOut, StarIn, StarOut, StarPageOut
from ..security import require_editor
from ..services import Services, get_services
from . import shared_get

router = APIRouter(prefix="/api/stars", tags=["stars"])


@router.get("", response_model=StarPageOut)
def list_stars(
    request: Request,
    page: Optional[int] = None,
    size: Optional[int] = None,
    movie_id: Optional[int] = Query(None, alias="movieId"),
    services: Services = Depends(get_services),
):
    """
    인물 목록 (페이지네이션)
    - movieId를 주면 해당 영화 크레딧에 포함된 인물만
    """
    page, size = pagination.set_defaults(page, size, services.settings.pagination)
    offset, limit = pagination.offset_limit(page, size)

    def fetch():
        stars, total = services.stars.get_stars_paginated(offset, limit, movie_id=movie_id)
        return pagination.response(page, size, total, [StarOut.model_validate(s) for s in stars])

    return shared_get(request, services, fetch)


@router.get("/{star_id}", response_model=StarDetailsOut)
def get_star(star_id: int, request: Request, services: Services = Depends(get_services)):
    return shared_get(
        request, services, lambda: StarDetailsOut.model_validate(services.stars.get_star_by_id(star_id))
    )


@router.post("", response_model=StarDetailsOut, status_code=201, dependencies=[Depends(require_editor)])
def create_star(payload: StarIn, services: Services = Depends(get_services)):
    return services.stars.create_star(Star(**payload.model_dump()))


@router.put("/{star_id}", dependencies=[Depends(require_editor)])
def update_star(star_id: int, payload: StarIn, services: Services = Depends(get_services)):
    services.stars.update_star(Star(id=star_id, **payload.model_dump()))


@router.delete("/{star_id}", dependencies=[Depends(require_editor)])
def delete_star(star_id: int, services: Services = Depends(get_services)):
    services.stars.delete_star(star_id)
