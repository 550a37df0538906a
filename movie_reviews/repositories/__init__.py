from .genres import GenreRepository
from .movies import CreditInfo, MovieRepository
from .reviews import ReviewRepository
from .stars import MovieCredit, StarRepository
from .users import UserRepository

__all__ = [
    "CreditInfo",
    "GenreRepository",
    "MovieCredit",
    "MovieRepository",
    "ReviewRepository",
    "StarRepository",
    "UserRepository",
]
