# ------------------------------------------------------------
# stars.py — 인물 서비스 (저장소 호출 + 변경 로그)
# ------------------------------------------------------------

from typing import List, Optional, Tuple

from ..logger import get_logger
from ..models import Star
from ..repositories import StarRepository

logger = get_logger()


class StarService:
    def __init__(self, repo: StarRepository):
        self.repo = repo

    def get_stars_paginated(self, offset: int, limit: int, movie_id: Optional[int] = None) -> Tuple[List[Star], int]:
        return self.repo.get_all_paginated(offset, limit, movie_id=movie_id)

    def get_star_by_id(self, star_id: int) -> Star:
        return self.repo.get_by_id(star_id)

    def create_star(self, star: Star) -> Star:
        star = self.repo.create(star)
        logger.info(f"star created: id={star.id} name={star.first_name} {star.last_name}")
        return star

    def update_star(self, star: Star) -> None:
        self.repo.update(star)
        logger.info(f"star updated: id={star.id}")

    def delete_star(self, star_id: int) -> None:
        self.repo.delete(star_id)
        logger.info(f"star deleted: id={star_id}")
