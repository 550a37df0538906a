# ------------------------------------------------------------
# main.py — FastAPI 앱 팩토리/미들웨어/에러 핸들러/라우터 등록 진입점
# ------------------------------------------------------------
# 실행:
#   uvicorn movie_reviews.main:create_app --factory --port 8080
#   python -m movie_reviews.main

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .db import Base, make_engine, make_session_factory
from .errors import AppError, Internal, ensure_internal
from .logger import get_logger, setup_logger
from .routers import auth, genres, movies, reviews, stars, users
from .services import Services

logger = get_logger()


def _error_response(exc: AppError) -> JSONResponse:
    body = {"message": exc.safe_error()}
    if isinstance(exc, Internal):
        logger.error(f"internal error incident_id={exc.incident_id}: {exc.message}\n{exc.stack_trace}")
        body["incidentId"] = exc.incident_id
    else:
        logger.warning(f"request failed with {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=body)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    설정 → 로거 → DB 엔진/테이블 → 서비스 컨테이너 → 초기 관리자 → FastAPI 앱 순서로 조립
    """
    settings = settings or Settings.from_env()
    setup_logger(settings.log_level)

    # 앱 시작 시점에 ORM 메타데이터 기준으로 테이블을 생성 ("존재하지 않는 테이블만")
    engine = make_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    services = Services(settings, make_session_factory(engine))
    services.auth.create_admin(settings.admin)

    app = FastAPI(title="Movie Reviews API")
    app.state.services = services
    app.state.engine = engine

    # -------------------------------
    # 분류되지 않은 예외 → Internal(500 + incidentId)
    # 여기서 응답으로 바꿔 반환하고 다시 던지지 않는다. CORS 미들웨어보다 안쪽에 등록
    # -------------------------------
    @app.middleware("http")
    async def convert_unexpected_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return _error_response(ensure_internal(exc))

    # -------------------------------
    # CORS 설정 (운영에서는 allow_origins를 구체 도메인으로 제한)
    # -------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------
    # 에러 → HTTP 응답 {"message", "incidentId"?}
    # -------------------------------
    @app.exception_handler(AppError)
    def handle_app_error(request: Request, exc: AppError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    def handle_validation_error(request: Request, exc: RequestValidationError):
        message = _format_validation_errors(exc)
        logger.warning(f"invalid request {request.method} {request.url.path}: {message}")
        return JSONResponse(status_code=400, content={"message": message})

    # -------------------------------
    # 라우터 등록
    # -------------------------------
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(genres.router)
    app.include_router(stars.router)
    app.include_router(movies.router)
    app.include_router(reviews.router)

    # 헬스체크용 루트 엔드포인트
    @app.get("/")
    def root():
        return {"ok": True, "service": "movie-reviews"}

    logger.info("movie reviews api initialized")
    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
