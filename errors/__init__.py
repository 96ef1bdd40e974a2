"""
Errors Module

오류 분류, 저장, 전역 훅

핸들러는 alerts/recovery 패키지에 의존하므로 여기서 가져오지 않습니다:
    from errors.handler import ErrorHandler, get_error_handler
"""

from errors.models import (
    ErrorCategory,
    ErrorContext,
    ErrorLogEntry,
    ErrorSeverity,
    LogLevel,
    generate_id,
    utcnow,
)

from errors.exceptions import (
    AlertDeliveryError,
    AppError,
    AuthenticationError,
    BusinessRuleError,
    DataError,
    NetworkError,
    RenderError,
    RequestTimeoutError,
    SecurityError,
)

from errors.classifier import (
    Classification,
    ErrorClassifier,
    detect_browser,
)

from errors.store import ErrorLog

from errors.hooks import (
    ConnectivityMonitor,
    GlobalErrorHooks,
)

__all__ = [
    # models
    "ErrorCategory",
    "ErrorContext",
    "ErrorLogEntry",
    "ErrorSeverity",
    "LogLevel",
    "generate_id",
    "utcnow",
    # exceptions
    "AlertDeliveryError",
    "AppError",
    "AuthenticationError",
    "BusinessRuleError",
    "DataError",
    "NetworkError",
    "RenderError",
    "RequestTimeoutError",
    "SecurityError",
    # classifier
    "Classification",
    "ErrorClassifier",
    "detect_browser",
    # store
    "ErrorLog",
    # hooks
    "ConnectivityMonitor",
    "GlobalErrorHooks",
]
