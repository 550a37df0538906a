# ------------------------------------------------------------
# routers — 라우터 공용 헬퍼 (GET 중복 실행 합치기)
# ------------------------------------------------------------

from typing import Any, Callable

from fastapi import Request

from ..logger import get_logger
from ..services import Services

logger = get_logger()


def shared_get(request: Request, services: Services, fn: Callable[[], Any]) -> Any:
    """
    같은 URL로 동시에 들어온 GET 요청은 한 번만 실행하고 결과를 공유한다.
    fn은 응답 스키마로 변환까지 끝낸 값을 반환해야 한다(요청 간에 ORM 객체를 공유하지 않도록).
    """
    key = str(request.url)
    result, shared = services.single_flight.do(key, fn)
    if shared:
        logger.debug(f"shared in-flight result for {key}")
    return result
