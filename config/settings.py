"""
오류 처리 서비스 설정 관리

환경 변수 및 애플리케이션 설정을 관리합니다.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# .env 파일 로드
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """애플리케이션 설정"""

    DEBUG = False
    TESTING = False
    ENVIRONMENT: str = "development"

    # 프로젝트 경로
    BASE_DIR = Path(__file__).parent.parent
    LOGS_DIR = Path(os.getenv("LOGS_DIR", str(BASE_DIR / "logs")))

    # 로깅
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_TO_FILE: bool = _env_bool("LOG_TO_FILE", "false")

    # 외부 모니터링 (크래시 리포팅 엔드포인트)
    MONITORING_ENDPOINT: Optional[str] = os.getenv("MONITORING_ENDPOINT")
    MONITORING_API_KEY: Optional[str] = os.getenv("MONITORING_API_KEY")

    # 분석 / 성능 모니터링
    ANALYTICS_ENABLED: bool = _env_bool("ANALYTICS_ENABLED", "false")
    PERFORMANCE_MONITORING_ENABLED: bool = _env_bool("PERFORMANCE_MONITORING_ENABLED", "true")
    SLOW_OPERATION_THRESHOLD_SECONDS: float = float(
        os.getenv("SLOW_OPERATION_THRESHOLD_SECONDS", "3.0")
    )
    METRICS_PORT: int = int(os.getenv("METRICS_PORT", "9090"))

    # 전역 훅 (sys.excepthook, threading.excepthook, asyncio)
    INSTALL_GLOBAL_HOOKS: bool = _env_bool("INSTALL_GLOBAL_HOOKS", "true")

    # 알림 수신자
    ALERT_ADMIN_EMAIL: str = os.getenv("ALERT_ADMIN_EMAIL", "admin@ads-pro-platform.com")
    ALERT_DEV_TEAM_EMAIL: str = os.getenv("ALERT_DEV_TEAM_EMAIL", "dev-team@ads-pro-platform.com")
    ALERT_SECURITY_EMAIL: str = os.getenv("ALERT_SECURITY_EMAIL", "security@ads-pro-platform.com")
    ALERT_SLACK_CHANNEL: str = os.getenv("ALERT_SLACK_CHANNEL", "#alerts")
    ALERT_WEBHOOK_URL: str = os.getenv(
        "ALERT_WEBHOOK_URL", "https://monitoring.ads-pro-platform.com/webhook"
    )

    # 알림 채널 자격 증명
    SLACK_WEBHOOK_URL: Optional[str] = os.getenv("SLACK_WEBHOOK_URL")
    SMS_GATEWAY_URL: Optional[str] = os.getenv("SMS_GATEWAY_URL")
    SMS_API_KEY: Optional[str] = os.getenv("SMS_API_KEY")

    # 파이프라인 단계별 타임아웃 (초, 0 = 제한 없음)
    SINK_TIMEOUT_SECONDS: float = float(os.getenv("SINK_TIMEOUT_SECONDS", "10"))
    RECOVERY_TIMEOUT_SECONDS: float = float(os.getenv("RECOVERY_TIMEOUT_SECONDS", "30"))
    ALERT_TIMEOUT_SECONDS: float = float(os.getenv("ALERT_TIMEOUT_SECONDS", "10"))

    @classmethod
    def ensure_directories(cls):
        """필수 디렉토리 생성"""
        if cls.LOG_TO_FILE:
            cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)


class DevelopmentConfig(Config):
    """개발 환경 설정"""
    DEBUG = True
    TESTING = False
    ENVIRONMENT = "development"


class ProductionConfig(Config):
    """프로덕션 환경 설정"""
    DEBUG = False
    TESTING = False
    ENVIRONMENT = "production"


class TestConfig(Config):
    """테스트 환경 설정"""
    DEBUG = True
    TESTING = True
    ENVIRONMENT = "test"
    LOG_TO_FILE = False
    INSTALL_GLOBAL_HOOKS = False
    ANALYTICS_ENABLED = True
    MONITORING_ENDPOINT = None


# 환경별 설정 선택
_env = os.getenv("ENVIRONMENT", "development").lower()
if _env == "production":
    config = ProductionConfig()
elif _env == "test":
    config = TestConfig()
else:
    config = DevelopmentConfig()

# 디렉토리 생성
config.ensure_directories()
