"""
Config Module

환경 변수 기반 설정
"""

from config.settings import (
    Config,
    DevelopmentConfig,
    ProductionConfig,
    TestConfig,
    config,
)

__all__ = [
    "Config",
    "DevelopmentConfig",
    "ProductionConfig",
    "TestConfig",
    "config",
]
