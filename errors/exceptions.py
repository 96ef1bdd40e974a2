"""
Structured Application Errors

발생 지점에서 카테고리/심각도/코드를 지정하는 예외 계층.
분류기는 문자열 매칭보다 이 속성을 우선 사용합니다.
"""

from typing import Iterable, Optional

from errors.models import ErrorCategory, ErrorSeverity


class AppError(Exception):
    """애플리케이션 오류 기본 클래스"""

    category: Optional[ErrorCategory] = None
    severity: Optional[ErrorSeverity] = None
    default_tags: tuple = ()

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None,
        tags: Optional[Iterable[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        if category is not None:
            self.category = ErrorCategory(category)
        if severity is not None:
            self.severity = ErrorSeverity(severity)
        self.tags = list(self.default_tags) + list(tags or [])


class NetworkError(AppError):
    category = ErrorCategory.API
    default_tags = ("network",)


class RequestTimeoutError(NetworkError):
    default_tags = ("network", "timeout")


class AuthenticationError(AppError):
    category = ErrorCategory.AUTH
    default_tags = ("auth",)


class DataError(AppError):
    category = ErrorCategory.DATA


class RenderError(AppError):
    category = ErrorCategory.UI


class SecurityError(AppError):
    category = ErrorCategory.SECURITY
    severity = ErrorSeverity.HIGH


class BusinessRuleError(AppError):
    category = ErrorCategory.BUSINESS


class AlertDeliveryError(AppError):
    """알림 채널 전송 실패"""
    category = ErrorCategory.SYSTEM
