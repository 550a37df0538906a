# ---------------------------------------------
# genres.py — 장르 CRUD 엔드포인트
# ---------------------------------------------

from typing import List

from fastapi import APIRouter, Depends, Request

from ..schemas import GenreIn, GenreOut
from ..security import require_editor
from ..services import Services, get_services
from . import shared_get

router = APIRouter(prefix="/api/genres", tags=["genres"])


@router.get("", response_model=List[GenreOut])
def list_genres(request: Request, services: Services = Depends(get_services)):
    """장르 전체 목록 (id 순)"""
    return shared_get(
        request, services, lambda: [GenreOut.model_validate(g) for g in services.genres.get_genres()]
    )


@router.get("/{genre_id}", response_model=GenreOut)
def get_genre(genre_id: int, request: Request, services: Services = Depends(get_services)):
    return shared_get(
        request, services, lambda: GenreOut.model_validate(services.genres.get_genre_by_id(genre_id))
    )


@router.post("", response_model=GenreOut, status_code=201, dependencies=[Depends(require_editor)])
def create_genre(payload: GenreIn, services: Services = Depends(get_services)):
    """
    장르를 생성합니다. (editor / admin)
    - 이름은 대소문자를 구분해 유일해야 하며, 중복이면 409
    """
    return services.genres.create_genre(payload.name)


@router.put("/{genre_id}", dependencies=[Depends(require_editor)])
def update_genre(genre_id: int, payload: GenreIn, services: Services = Depends(get_services)):
    services.genres.update_genre(genre_id, payload.name)


@router.delete("/{genre_id}", dependencies=[Depends(require_editor)])
def delete_genre(genre_id: int, services: Services = Depends(get_services)):
    """장르 삭제. 이 장르를 참조하던 영화-장르 연결도 함께 삭제됩니다."""
    services.genres.delete_genre(genre_id)
