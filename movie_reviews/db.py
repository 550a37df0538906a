# -------------------------------------------------------
# db.py — SQLAlchemy 엔진/세션 팩토리 및 DB 에러 분류기
# -------------------------------------------------------

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker

# MySQL 에러 코드
_MYSQL_DUPLICATE_ENTRY = 1062
_MYSQL_FK_VIOLATIONS = (1451, 1452)

# ----------------------------------------------
# Declarative Base
# ----------------------------------------------
# - 모든 ORM 모델이 상속받는 베이스 클래스
Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    """
    SQLAlchemy Engine 생성

    - pool_pre_ping=True:
        커넥션 풀에서 커넥션을 빌려오기 전에 ping으로 죽은 커넥션을 감지/재연결.
        'MySQL server has gone away' 문제를 줄여줌.
    - pool_recycle=3600:
        커넥션 수명(초). 1시간 후 재생성.
    - SQLite(로컬/테스트)에서는 스레드 간 커넥션 공유를 허용하고
      외래키 제약을 켠다.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(database_url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(database_url, pool_pre_ping=True, pool_recycle=3600)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_session_factory(engine: Engine) -> sessionmaker:
    # - autoflush=False: 쿼리 실행 시점의 자동 flush 방지(필요 시 수동 flush)
    # - expire_on_commit=False: 커밋 후에도 반환한 ORM 객체의 속성을 그대로 읽을 수 있게 함
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def is_unique_violation(exc: BaseException, *hints: str) -> bool:
    """
    UNIQUE 제약 위반 여부.
    hints가 주어지면 에러 메시지에 그중 하나가 포함된 경우만 True.
    - MySQL: "Duplicate entry ... for key 'uq_genres_name'" (8.0.19+는 'genres.uq_genres_name')
      → 제약 이름으로 구분
    - SQLite: "UNIQUE constraint failed: genres.name" → 테이블.컬럼으로 구분
    """
    if not isinstance(exc, IntegrityError):
        return False
    orig = exc.orig
    message = str(orig)
    code = orig.args[0] if getattr(orig, "args", None) else None
    unique = code == _MYSQL_DUPLICATE_ENTRY or "UNIQUE constraint failed" in message
    return unique and (not hints or any(h in message for h in hints))


def is_foreign_key_violation(exc: BaseException) -> bool:
    if not isinstance(exc, IntegrityError):
        return False
    orig = exc.orig
    code = orig.args[0] if getattr(orig, "args", None) else None
    return code in _MYSQL_FK_VIOLATIONS or "FOREIGN KEY constraint failed" in str(orig)


def is_mysql(session) -> bool:
    return session.get_bind().dialect.name == "mysql"
