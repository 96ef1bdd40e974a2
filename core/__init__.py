"""
Core 패키지

loguru 로거 설정
"""

from core.logging_config import setup_logger, logger

__all__ = [
    "setup_logger",
    "logger",
]
