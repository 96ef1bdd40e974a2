"""
Error Classification

오류 + 컨텍스트를 카테고리/심각도/태그로 분류
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Type

from core.logging_config import setup_logger
from errors.exceptions import AppError
from errors.models import ErrorCategory, ErrorContext, ErrorSeverity

logger = setup_logger(__name__)


# 예외 유형별 내용 태그
EXCEPTION_TAGS: List[Tuple[Type[BaseException], Tuple[str, ...]]] = [
    (TimeoutError, ("timeout",)),
    (ConnectionError, ("network",)),
    (PermissionError, ("auth",)),
]

# 메시지 부분 문자열 → 태그 (대소문자 무시)
MESSAGE_TAGS: List[Tuple[str, Tuple[str, ...]]] = [
    ("network", ("network",)),
    ("timeout", ("timeout",)),
    ("auth", ("401", "unauthorized")),
    ("server_error", ("500",)),
]

# User-Agent 검사 순서 (Chromium 기반 Edge UA는 chrome으로 분류됨)
BROWSERS: List[Tuple[str, str]] = [
    ("Chrome", "chrome"),
    ("Firefox", "firefox"),
    ("Safari", "safari"),
    ("Edge", "edge"),
]


def _coerce(enum_type, value, default):
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError:
        logger.warning(f"Invalid {enum_type.__name__}: {value!r}, using {default.value}")
        return default


@dataclass
class Classification:
    """분류 결과"""
    category: ErrorCategory
    severity: ErrorSeverity
    tags: List[str] = field(default_factory=list)


def _classify_http_status(status_code: int) -> Optional[str]:
    """HTTP 상태 코드 기반 태그"""
    if status_code in (401, 403):
        return "auth"
    elif status_code == 429:
        return "rate_limited"
    elif 500 <= status_code < 600:
        return "server_error"
    return None


def detect_browser(user_agent: Optional[str]) -> str:
    if not user_agent:
        return "unknown"
    for marker, name in BROWSERS:
        if marker in user_agent:
            return name
    return "unknown"


class ErrorClassifier:
    """
    오류 분류기

    부작용이 없고 예외를 던지지 않습니다. 분류 실패가 원래 오류의
    처리를 막아서는 안 되기 때문에 내부 실패 시 카테고리 태그만 반환합니다.
    """

    def __init__(self, is_online: Optional[Callable[[], bool]] = None):
        self._is_online = is_online

    def resolve(
        self,
        error: Optional[BaseException],
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None,
    ) -> Tuple[ErrorCategory, ErrorSeverity]:
        """
        명시 인자 > AppError 속성 > 기본값(system/medium)

        잘못된 값은 해당 축만 기본값으로 대체합니다.
        """
        if category is None and isinstance(error, AppError):
            category = error.category
        if severity is None and isinstance(error, AppError):
            severity = error.severity
        return (
            _coerce(ErrorCategory, category, ErrorCategory.SYSTEM),
            _coerce(ErrorSeverity, severity, ErrorSeverity.MEDIUM),
        )

    def classify(
        self,
        error: Optional[BaseException],
        context: ErrorContext,
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None,
        message: Optional[str] = None,
    ) -> Classification:
        """
        오류 분류

        Args:
            error: 원본 예외 (로그 엔트리는 None)
            context: 오류 컨텍스트
            category: 호출자가 지정한 카테고리
            severity: 호출자가 지정한 심각도
            message: error가 없을 때 내용 태그에 사용할 메시지

        Returns:
            Classification
        """
        resolved_category, resolved_severity = self.resolve(error, category, severity)

        try:
            tags = self._generate_tags(error, context, resolved_category, message)
        except Exception as e:
            logger.error(f"Tag generation failed: {e}")
            tags = [resolved_category.value]

        return Classification(
            category=resolved_category,
            severity=resolved_severity,
            tags=tags,
        )

    def _generate_tags(
        self,
        error: Optional[BaseException],
        context: ErrorContext,
        category: ErrorCategory,
        message: Optional[str],
    ) -> List[str]:
        tags: List[str] = []

        def add(tag: str):
            if tag not in tags:
                tags.append(tag)

        add(category.value)

        # 컨텍스트 태그
        if context.component:
            add(f"component:{context.component}")
        if context.action:
            add(f"action:{context.action}")
        if context.user_id:
            add(f"user:{context.user_id}")

        # 구조화된 오류 우선
        if isinstance(error, AppError):
            if error.code:
                add(f"code:{error.code}")
            for tag in error.tags:
                add(tag)

        if error is not None:
            for exc_type, exc_tags in EXCEPTION_TAGS:
                if isinstance(error, exc_type):
                    for tag in exc_tags:
                        add(tag)

            status_code = getattr(error, "status_code", None)
            if isinstance(status_code, int):
                status_tag = _classify_http_status(status_code)
                if status_tag:
                    add(status_tag)

        # 메시지 기반 (서드파티 오류 대비)
        text = (str(error) if error is not None else message or "").lower()
        for tag, needles in MESSAGE_TAGS:
            if any(needle in text for needle in needles):
                add(tag)

        # 실행 환경
        add(f"browser:{detect_browser(context.user_agent)}")
        if self._is_online is not None and not self._is_online():
            add("offline")

        return tags
