# -----------------------------------------------------------
# users.py — 사용자 프로필 조회/수정/삭제 및 권한 변경 엔드포인트
# -----------------------------------------------------------

from fastapi import APIRouter, Depends

from ..errors import BadRequest
from ..models import ROLES
from ..schemas import UserBioIn, UserOut
from ..security import require_admin, require_self
from ..services import Services, get_services

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, services: Services = Depends(get_services)):
    return services.users.get_user_by_id(user_id)


@router.get("/username/{username}", response_model=UserOut)
def get_user_by_username(username: str, services: Services = Depends(get_services)):
    return services.users.get_user_by_username(username)


@router.put("/{user_id}", dependencies=[Depends(require_self)])
def update_user(user_id: int, payload: UserBioIn, services: Services = Depends(get_services)):
    """자기소개(bio) 수정 (본인 또는 admin)"""
    services.users.update_bio(user_id, payload.bio)


@router.delete("/{user_id}", dependencies=[Depends(require_self)])
def delete_user(user_id: int, services: Services = Depends(get_services)):
    """
    사용자 삭제 (본인 또는 admin)
    - 행은 남기고 deleted_at만 기록(soft delete). 삭제된 사용자는 조회/로그인 불가
    """
    services.users.delete_user(user_id)


@router.put("/{user_id}/role/{role}", dependencies=[Depends(require_admin)])
def update_user_role(user_id: int, role: str, services: Services = Depends(get_services)):
    """권한 변경 (admin 전용). role: user | editor | admin"""
    if role not in ROLES:
        raise BadRequest(f"invalid role '{role}': must be one of {', '.join(ROLES)}")
    services.users.update_role(user_id, role)
