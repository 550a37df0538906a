# ------------------------------------------------------------
# pagination.py — page/size → (offset, limit) 변환 및 응답 포맷
# ------------------------------------------------------------

from typing import Any, Dict, List, Optional, Tuple

from .config import PaginationConfig


def set_defaults(page: Optional[int], size: Optional[int], cfg: PaginationConfig) -> Tuple[int, int]:
    # page는 1부터 시작, size는 기본값/최대값으로 보정
    if page is None or page < 1:
        page = 1
    if size is None or size < 1:
        size = cfg.default_size
    if size > cfg.max_size:
        size = cfg.max_size
    return page, size


def offset_limit(page: int, size: int) -> Tuple[int, int]:
    return (page - 1) * size, size


def response(page: int, size: int, total: int, items: List[Any]) -> Dict[str, Any]:
    return {"page": page, "size": size, "total": total, "items": items}
