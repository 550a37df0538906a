# ------------------------------------------------------------
# services — 저장소/서비스 조립(컨테이너) 및 FastAPI 의존성
# ------------------------------------------------------------

from fastapi import Request
from sqlalchemy.orm import sessionmaker

from ..config import Settings
from ..repositories import (
    GenreRepository,
    MovieRepository,
    ReviewRepository,
    StarRepository,
    UserRepository,
)
from ..security import JwtService
from ..singleflight import SingleFlight
from .genres import GenreService
from .movies import MovieDetails, MovieService
from .reviews import ReviewService
from .stars import StarService
from .users import AuthService, UserService


class Services:
    """앱 하나당 하나. create_app()에서 만들어 app.state.services에 보관"""

    def __init__(self, settings: Settings, session_factory: sessionmaker):
        self.settings = settings

        genre_repo = GenreRepository(session_factory)
        star_repo = StarRepository(session_factory)
        movie_repo = MovieRepository(session_factory, genre_repo, star_repo)
        review_repo = ReviewRepository(session_factory, movie_repo)
        user_repo = UserRepository(session_factory)

        self.jwt = JwtService(settings.jwt_secret, settings.jwt_access_expiration)
        self.genres = GenreService(genre_repo)
        self.stars = StarService(star_repo)
        self.movies = MovieService(movie_repo, genre_repo, star_repo)
        self.reviews = ReviewService(review_repo)
        self.users = UserService(user_repo)
        self.auth = AuthService(user_repo, self.jwt)
        # GET 요청 중복 실행 방지 (키: 요청 URL)
        self.single_flight = SingleFlight()


def get_services(request: Request) -> Services:
    return request.app.state.services


__all__ = [
    "AuthService",
    "GenreService",
    "MovieDetails",
    "MovieService",
    "ReviewService",
    "Services",
    "StarService",
    "UserService",
    "get_services",
]
