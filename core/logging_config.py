"""
로깅 설정 및 유틸리티
"""

import sys
from loguru import logger
from config import config

_configured = False


def setup_logger(module_name: str = "error-handler"):
    """
    로거 설정

    모든 모듈이 호출하지만 싱크 구성은 최초 한 번만 수행합니다.

    Args:
        module_name: 모듈 이름 (바인딩되는 이름)
    """
    global _configured

    if not _configured:
        # 기본 핸들러 제거
        logger.remove()

        # 콘솔 출력
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            level="DEBUG" if config.DEBUG else config.LOG_LEVEL,
            colorize=True,
        )

        if config.LOG_TO_FILE:
            # 파일 출력 (DEBUG 이상)
            logger.add(
                config.LOGS_DIR / "error-handler.log",
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
                level="DEBUG",
                rotation="10 MB",
                retention="30 days",
                compression="zip",
            )

            # 에러 로그 (ERROR 이상)
            logger.add(
                config.LOGS_DIR / "error-handler_error.log",
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
                level="ERROR",
                rotation="10 MB",
                retention="90 days",
                compression="zip",
            )

        _configured = True

    return logger.bind(module=module_name)


# 기본 로거 초기화
setup_logger()
