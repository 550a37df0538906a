# ------------------------------------------------------------
# errors.py — 도메인 에러 분류 (NotFound / AlreadyExists / ...)
# ------------------------------------------------------------
# 저장소 계층에서 에러가 "발견된 지점"에서 바로 분류하고,
# 서비스/트랜잭션 계층은 분류된 에러를 그대로 전달한다.
# 분류되지 않은 드라이버/커넥션 에러만 Internal로 감싼다.

import traceback
import uuid
from typing import Any, Optional


class AppError(Exception):
    """모든 도메인 에러의 베이스 클래스"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def safe_error(self) -> str:
        # 클라이언트에 노출해도 안전한 메시지
        return self.message


class NotFound(AppError):
    status_code = 404

    def __init__(self, subject: str, key: str, value: Any):
        super().__init__(f"{subject} with {key} '{value}' not found")
        self.subject = subject
        self.key = key
        self.value = value


class AlreadyExists(AppError):
    status_code = 409

    def __init__(self, subject: str, key: str, value: Any):
        super().__init__(f"{subject} with {key} '{value}' already exists")
        self.subject = subject
        self.key = key
        self.value = value


class VersionMismatch(AppError):
    status_code = 409

    def __init__(self, subject: str, key: str, value: Any, version: int):
        super().__init__(f"{subject} with {key} '{value}' and version {version} not found")
        self.subject = subject
        self.key = key
        self.value = value
        self.version = version


class Forbidden(AppError):
    status_code = 403


class Unauthorized(AppError):
    status_code = 401


class BadRequest(AppError):
    status_code = 400


class Internal(AppError):
    """예상치 못한 서버 에러. 원인은 서버 로그에만 남기고 클라이언트에는 incident id만 전달"""

    status_code = 500

    def __init__(self, cause: Optional[BaseException] = None, message: str = "internal server error"):
        super().__init__(message if cause is None else f"{message}: {cause}")
        self.cause = cause
        self.incident_id = str(uuid.uuid4())
        if cause is not None and cause.__traceback__ is not None:
            self.stack_trace = "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
        else:
            self.stack_trace = "".join(traceback.format_stack(limit=10))

    def safe_error(self) -> str:
        return "internal server error"


def ensure_internal(exc: BaseException) -> AppError:
    # 이미 분류된 도메인 에러는 그대로, 나머지는 Internal로 감싼다
    if isinstance(exc, AppError):
        return exc
    return Internal(exc)
