# ------------------------------------------------------------
# services/movies.py — 영화 조회 조립(장르/크레딧 병렬 조회) + 쓰기 전 검증
# ------------------------------------------------------------

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..errors import NotFound
from ..logger import get_logger
from ..models import Genre, Movie
from ..repositories import CreditInfo, GenreRepository, MovieCredit, MovieRepository, StarRepository

logger = get_logger()


@dataclass
class MovieDetails:
    movie: Movie
    genres: List[Genre] = field(default_factory=list)
    cast: List[MovieCredit] = field(default_factory=list)


class MovieService:
    def __init__(self, repo: MovieRepository, genres: GenreRepository, stars: StarRepository):
        self.repo = repo
        self.genres = genres
        self.stars = stars

    def get_movies_paginated(
        self,
        offset: int,
        limit: int,
        search_term: Optional[str] = None,
        sort_by_rating: Optional[str] = None,
        star_id: Optional[int] = None,
    ) -> Tuple[List[Movie], int]:
        return self.repo.get_all_paginated(
            offset, limit, search_term=search_term, sort_by_rating=sort_by_rating, star_id=star_id
        )

    def get_movie_by_id(self, movie_id: int) -> MovieDetails:
        """
        영화 행을 읽은 뒤 장르와 크레딧을 두 스레드에서 동시에 조회한다.
        - 각 조회는 자기 세션(커넥션)을 사용
        - 하나라도 실패하면 아직 시작하지 않은 나머지를 취소하고 첫 에러를 다시 던짐
        """
        movie = self.repo.get_by_id(movie_id)

        with ThreadPoolExecutor(max_workers=2) as pool:
            genres_future = pool.submit(self.genres.get_by_movie_id, movie_id)
            cast_future = pool.submit(self.stars.get_cast_by_movie_id, movie_id)
            futures = [genres_future, cast_future]

            done, pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                if future in done and future.exception() is not None:
                    for other in pending:
                        other.cancel()
                    raise future.exception()

        return MovieDetails(movie=movie, genres=genres_future.result(), cast=cast_future.result())

    def create_movie(self, movie: Movie, genre_ids: Sequence[int], cast: Sequence[CreditInfo]) -> MovieDetails:
        self._check_references(genre_ids, cast)
        movie = self.repo.create(movie, genre_ids, cast)
        logger.info(f"movie created: id={movie.id} title={movie.title}")
        return self.get_movie_by_id(movie.id)

    def update_movie(self, movie: Movie, genre_ids: Sequence[int], cast: Sequence[CreditInfo]) -> None:
        self._check_references(genre_ids, cast)
        self.repo.update(movie, genre_ids, cast)
        logger.info(f"movie updated: id={movie.id} version={movie.version}")

    def delete_movie(self, movie_id: int) -> None:
        self.repo.delete(movie_id)
        logger.info(f"movie deleted: id={movie_id}")

    def _check_references(self, genre_ids: Sequence[int], cast: Sequence[CreditInfo]) -> None:
        # FK 위반 대신 어떤 id가 없는지 알려주기 위해 쓰기 전에 확인
        missing = self.genres.get_missing_ids(genre_ids)
        if missing:
            raise NotFound("genre", "id", missing[0])
        missing = self.stars.get_missing_ids([c.star_id for c in cast])
        if missing:
            raise NotFound("star", "id", missing[0])
