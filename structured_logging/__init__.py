"""
Structured Logging Module

JSON 구조화 로깅 시스템
"""

from structured_logging.json_logger import (
    # 컨텍스트 함수
    set_user_id,
    get_user_id,
    set_session_id,
    get_session_id,
    set_component,
    get_component,
    set_action,
    get_action,
    get_extra_context,
    current_context,
    generate_session_id,
    # 필터 및 포매터
    ContextFilter,
    JSONFormatter,
    PrettyJSONFormatter,
    # 설정 함수
    configure_json_logging,
    # 컨텍스트 관리자
    LogContext,
    # 로거
    ComponentLogger,
    LogEntry,
    StructuredLogger,
    get_structured_logger,
)

__all__ = [
    # 컨텍스트 함수
    "set_user_id",
    "get_user_id",
    "set_session_id",
    "get_session_id",
    "set_component",
    "get_component",
    "set_action",
    "get_action",
    "get_extra_context",
    "current_context",
    "generate_session_id",
    # 필터 및 포매터
    "ContextFilter",
    "JSONFormatter",
    "PrettyJSONFormatter",
    # 설정 함수
    "configure_json_logging",
    # 컨텍스트 관리자
    "LogContext",
    # 로거
    "ComponentLogger",
    "LogEntry",
    "StructuredLogger",
    "get_structured_logger",
]
