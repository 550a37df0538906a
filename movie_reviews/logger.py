# ------------------------------------------------------------
# logger.py — 애플리케이션 공용 로거 (콘솔 출력)
# ------------------------------------------------------------

import logging

# 앱 전체가 공유하는 로거
logger = logging.getLogger("movie_reviews")
logger.setLevel(logging.INFO)

# 콘솔 핸들러: 레벨 필터링은 로거에서 하므로 핸들러는 DEBUG부터 모두 통과
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.DEBUG)
console_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
console_handler.setFormatter(console_format)
logger.addHandler(console_handler)


def setup_logger(level: str) -> logging.Logger:
    """설정의 LOG_LEVEL(debug/info/warning/error)을 로거에 적용"""
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def get_logger():
    return logger
