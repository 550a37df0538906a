# ------------------------------------------------------------
# genres.py — 장르 서비스 (저장소 호출 + 변경 로그)
# ------------------------------------------------------------

from typing import List

from ..logger import get_logger
from ..models import Genre
from ..repositories import GenreRepository

logger = get_logger()


class GenreService:
    def __init__(self, repo: GenreRepository):
        self.repo = repo

    def get_genres(self) -> List[Genre]:
        return self.repo.get_all()

    def get_genre_by_id(self, genre_id: int) -> Genre:
        return self.repo.get_by_id(genre_id)

    def create_genre(self, name: str) -> Genre:
        genre = self.repo.create(name)
        logger.info(f"genre created: id={genre.id} name={genre.name}")
        return genre

    def update_genre(self, genre_id: int, name: str) -> None:
        self.repo.update(genre_id, name)
        logger.info(f"genre updated: id={genre_id} name={name}")

    def delete_genre(self, genre_id: int) -> None:
        self.repo.delete(genre_id)
        logger.info(f"genre deleted: id={genre_id}")
