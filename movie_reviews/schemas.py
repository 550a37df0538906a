from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

# 비밀번호 정책에서 허용하는 특수문자
PASSWORD_SPECIAL_CHARS = "!$#()[]{}?+*~@^&-_"


# ------------------------------------------------------------
# 장르
# ------------------------------------------------------------
class GenreIn(BaseModel):
    name: str = Field(..., min_length=3, max_length=32)


class GenreOut(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


# ------------------------------------------------------------
# 인물(Star)
# ------------------------------------------------------------
class StarIn(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    middle_name: Optional[str] = Field(None, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    birth_date: date
    birth_place: Optional[str] = Field(None, max_length=100)
    death_date: Optional[date] = None
    bio: Optional[str] = None


class StarOut(BaseModel):
    # 목록/크레딧에서 쓰는 요약 정보
    id: int
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    birth_date: date
    death_date: Optional[date] = None
    created_at: datetime

    class Config:
        from_attributes = True


class StarDetailsOut(StarOut):
    birth_place: Optional[str] = None
    bio: Optional[str] = None


# ------------------------------------------------------------
# 영화
# ------------------------------------------------------------
class MovieCreditIn(BaseModel):
    star_id: int
    role: str = Field(..., min_length=1, max_length=32)
    details: Optional[str] = None


class MovieCreateIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    release_date: date
    description: str = ""
    # 요청 목록의 순서가 그대로 표시 순서(order_no)가 됨
    genre_ids: List[int] = []
    cast: List[MovieCreditIn] = []


class MovieUpdateIn(MovieCreateIn):
    # 클라이언트가 마지막으로 읽은 버전 (낙관적 동시성 제어)
    version: int = Field(..., ge=0)


class MovieOut(BaseModel):
    id: int
    title: str
    release_date: date
    avg_rating: Optional[float] = None
    version: int
    created_at: datetime

    class Config:
        from_attributes = True


class MovieCreditOut(BaseModel):
    star: StarOut
    role: str
    details: Optional[str] = None

    class Config:
        from_attributes = True


class MovieDetailsOut(MovieOut):
    description: str
    genres: List[GenreOut] = []
    cast: List[MovieCreditOut] = []


# ------------------------------------------------------------
# 리뷰
# ------------------------------------------------------------
class ReviewUpdateIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=10)


class ReviewCreateIn(ReviewUpdateIn):
    movie_id: int


class ReviewOut(BaseModel):
    id: int
    movie_id: int
    user_id: int
    title: str
    content: str
    rating: int
    created_at: datetime

    class Config:
        from_attributes = True


# ------------------------------------------------------------
# 사용자 / 인증
# ------------------------------------------------------------
class RegisterIn(BaseModel):
    username: str = Field(..., min_length=5, max_length=16)
    email: EmailStr
    # bcrypt는 72바이트까지만 사용
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, v: str) -> str:
        if len(v) > 127:
            raise ValueError("email must be at most 127 characters")
        return v

    @field_validator("password")
    @classmethod
    def check_password_policy(cls, v: str) -> str:
        if len(v.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        if not any(c.islower() for c in v):
            raise ValueError("password must contain a lowercase letter")
        if not any(c.isupper() for c in v):
            raise ValueError("password must contain an uppercase letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("password must contain a digit")
        if not any(c in PASSWORD_SPECIAL_CHARS for c in v):
            raise ValueError(f"password must contain one of {PASSWORD_SPECIAL_CHARS}")
        return v


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., max_length=72)


class TokenOut(BaseModel):
    access_token: str


class UserBioIn(BaseModel):
    bio: Optional[str] = None


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    role: str
    bio: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ------------------------------------------------------------
# 페이지네이션 응답: {"page", "size", "total", "items"}
# ------------------------------------------------------------
class PageOut(BaseModel):
    page: int
    size: int
    total: int


class StarPageOut(PageOut):
    items: List[StarOut]


class MoviePageOut(PageOut):
    items: List[MovieOut]


class ReviewPageOut(PageOut):
    items: List[ReviewOut]
