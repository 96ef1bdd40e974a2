"""
설정 파일 테스트

config 모듈의 설정 관리 기능을 테스트합니다.
"""

from pathlib import Path


def test_config_module_import():
    """config 모듈 import 가능 확인"""
    from config import config, Config
    assert config is not None
    assert Config is not None


def test_test_environment_selected():
    """ENVIRONMENT=test 이면 TestConfig 사용"""
    from config import config, TestConfig

    assert isinstance(config, TestConfig)
    assert config.TESTING is True
    assert config.INSTALL_GLOBAL_HOOKS is False
    assert config.MONITORING_ENDPOINT is None


def test_config_has_required_attributes():
    """필수 설정 속성 존재 확인"""
    from config import config

    required_attrs = [
        'LOG_LEVEL',
        'LOGS_DIR',
        'LOG_TO_FILE',
        'MONITORING_ENDPOINT',
        'ANALYTICS_ENABLED',
        'PERFORMANCE_MONITORING_ENABLED',
        'SLOW_OPERATION_THRESHOLD_SECONDS',
        'ALERT_ADMIN_EMAIL',
        'ALERT_DEV_TEAM_EMAIL',
        'ALERT_SECURITY_EMAIL',
        'ALERT_SLACK_CHANNEL',
        'ALERT_WEBHOOK_URL',
        'SINK_TIMEOUT_SECONDS',
        'RECOVERY_TIMEOUT_SECONDS',
        'ALERT_TIMEOUT_SECONDS',
        'METRICS_PORT',
    ]

    for attr in required_attrs:
        assert hasattr(config, attr), f"설정 속성 누락: {attr}"


def test_config_paths_are_pathlib():
    """설정 경로가 pathlib.Path 타입인지 확인"""
    from config import config

    assert isinstance(config.BASE_DIR, Path)
    assert isinstance(config.LOGS_DIR, Path)


def test_default_alert_recipients():
    """기본 알림 수신자"""
    from config import Config

    assert Config.ALERT_ADMIN_EMAIL == "admin@ads-pro-platform.com"
    assert Config.ALERT_DEV_TEAM_EMAIL == "dev-team@ads-pro-platform.com"
    assert Config.ALERT_SECURITY_EMAIL == "security@ads-pro-platform.com"
    assert Config.ALERT_SLACK_CHANNEL == "#alerts"


def test_slow_operation_threshold_default():
    from config import Config

    assert Config.SLOW_OPERATION_THRESHOLD_SECONDS == 3.0


def test_environment_profiles():
    """환경별 설정 클래스"""
    from config import DevelopmentConfig, ProductionConfig

    assert DevelopmentConfig.DEBUG is True
    assert ProductionConfig.DEBUG is False
    assert ProductionConfig.ENVIRONMENT == "production"


def test_analytics_disabled_by_default():
    """ANALYTICS_ENABLED=true 일 때만 분석 수집"""
    from config import Config, TestConfig

    assert Config.ANALYTICS_ENABLED is False
    assert TestConfig.ANALYTICS_ENABLED is True
