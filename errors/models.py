"""
Error Log Data Model

오류 로그 엔트리 및 컨텍스트 모델
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class LogLevel(str, Enum):
    """로그 엔트리 레벨"""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class ErrorCategory(str, Enum):
    """오류 발생 영역"""
    API = "api"
    UI = "ui"
    AUTH = "auth"
    DATA = "data"
    PERFORMANCE = "performance"
    SECURITY = "security"
    BUSINESS = "business"
    SYSTEM = "system"


class ErrorSeverity(str, Enum):
    """오류 긴급도"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id(prefix: str = "err") -> str:
    """`<prefix>_<epoch ms>_<9자리 랜덤>` 형식 ID 생성"""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


# camelCase 키 호환
_CONTEXT_KEY_ALIASES = {
    "userId": "user_id",
    "sessionId": "session_id",
    "userAgent": "user_agent",
}


@dataclass
class ErrorContext:
    """오류 발생 시점의 컨텍스트"""
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    component: Optional[str] = None
    action: Optional[str] = None
    timestamp: datetime = field(default_factory=utcnow)
    url: Optional[str] = None
    user_agent: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    # 복구 전략 판단용, 핸들러가 엔트리 카테고리로 채움
    category: Optional[ErrorCategory] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ErrorContext":
        """딕셔너리에서 컨텍스트 생성 (알 수 없는 키는 metadata로)"""
        known = set(cls.__dataclass_fields__)
        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CONTEXT_KEY_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                extra[key] = value
        if extra:
            kwargs["metadata"] = {**extra, **(kwargs.get("metadata") or {})}
        if kwargs.get("category") is not None:
            kwargs["category"] = ErrorCategory(kwargs["category"])
        return cls(**kwargs)

    @classmethod
    def coerce(cls, context: Any) -> "ErrorContext":
        if context is None:
            return cls()
        if isinstance(context, cls):
            return context
        return cls.from_dict(context)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "session_id": self.session_id,
            "component": self.component,
            "action": self.action,
            "timestamp": self.timestamp.isoformat(),
            "url": self.url,
            "user_agent": self.user_agent,
            "metadata": self.metadata,
        }


@dataclass
class ErrorLogEntry:
    """오류/로그 이벤트 한 건의 기록"""
    message: str
    level: LogLevel = LogLevel.ERROR
    category: ErrorCategory = ErrorCategory.SYSTEM
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    context: ErrorContext = field(default_factory=ErrorContext)
    error: Optional[BaseException] = None
    stack: Optional[str] = None
    resolved: bool = False
    created_at: datetime = field(default_factory=utcnow)
    resolved_at: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)
    id: str = field(default_factory=generate_id)

    def add_tag(self, tag: str) -> bool:
        """태그 추가 (중복 무시), 추가 여부 반환"""
        if tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def mark_resolved(self, *tags: str) -> bool:
        """
        해결 처리

        이미 해결된 엔트리는 변경하지 않습니다.

        Returns:
            상태가 바뀌었는지 여부
        """
        if self.resolved:
            return False
        self.resolved = True
        self.resolved_at = utcnow()
        for tag in tags:
            self.add_tag(tag)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "level": self.level.value,
            "message": self.message,
            "error_type": type(self.error).__name__ if self.error is not None else None,
            "context": self.context.to_dict(),
            "stack": self.stack,
            "category": self.category.value,
            "severity": self.severity.value,
            "resolved": self.resolved,
            "created_at": self.created_at.isoformat(),
            "resolved_at": self.resolved_at.isoformat() if self.resolved_at else None,
            "tags": list(self.tags),
        }

    def monitoring_payload(self) -> Dict[str, Any]:
        """외부 모니터링 전송 페이로드"""
        return {
            "id": self.id,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context.to_dict(),
            "stack": self.stack,
        }

    def analytics_payload(self) -> Dict[str, Any]:
        """분석 이벤트 페이로드"""
        return {
            "error_id": self.id,
            "category": self.category.value,
            "severity": self.severity.value,
            "component": self.context.component,
            "resolved": self.resolved,
        }
