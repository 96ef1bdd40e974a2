"""
JSON Structured Logging

애플리케이션 이벤트용 구조화된 JSON 로깅 시스템
"""

import asyncio
import json
import logging
import sys
import time
import uuid
from collections import deque
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional

from config import config
from core.logging_config import setup_logger

logger = setup_logger(__name__)

# 컨텍스트 변수
_user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)
_session_id: ContextVar[Optional[str]] = ContextVar("session_id", default=None)
_component: ContextVar[Optional[str]] = ContextVar("component", default=None)
_action: ContextVar[Optional[str]] = ContextVar("action", default=None)
_extra_context: ContextVar[Dict[str, Any]] = ContextVar("extra_context", default={})

_CONTEXT_VARS: Dict[str, ContextVar] = {
    "user_id": _user_id,
    "session_id": _session_id,
    "component": _component,
    "action": _action,
}


def set_user_id(user_id: str):
    """사용자 ID 설정"""
    _user_id.set(user_id)


def get_user_id() -> Optional[str]:
    """사용자 ID 조회"""
    return _user_id.get()


def set_session_id(session_id: str):
    _session_id.set(session_id)


def get_session_id() -> Optional[str]:
    return _session_id.get()


def set_component(component: str):
    _component.set(component)


def get_component() -> Optional[str]:
    return _component.get()


def set_action(action: str):
    _action.set(action)


def get_action() -> Optional[str]:
    return _action.get()


def get_extra_context() -> Dict[str, Any]:
    """추가 컨텍스트 조회"""
    return _extra_context.get()


def current_context() -> Dict[str, Any]:
    """현재 설정된 컨텍스트 값 (None 제외)"""
    context = {name: var.get() for name, var in _CONTEXT_VARS.items() if var.get() is not None}
    context.update(get_extra_context())
    return context


def generate_session_id() -> str:
    """`session_<epoch ms>_<7자리 랜덤>` 형식 세션 ID"""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"


class ContextFilter(logging.Filter):
    """로그에 컨텍스트 정보를 추가하는 필터"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.user_id = get_user_id() or "-"
        record.session_id = get_session_id() or "-"
        record.component = get_component() or "-"
        record.action = get_action() or "-"
        record.extra_context = get_extra_context()
        return True


class JSONFormatter(logging.Formatter):
    """JSON 형식 로그 포매터"""

    RESERVED_ATTRS = {
        "args", "asctime", "created", "exc_info", "exc_text", "filename",
        "funcName", "levelname", "levelno", "lineno", "module", "msecs",
        "message", "msg", "name", "pathname", "process", "processName",
        "relativeCreated", "stack_info", "thread", "threadName", "taskName",
    }
    CONTEXT_ATTRS = ("user_id", "session_id", "component", "action")

    def __init__(
        self,
        include_timestamp: bool = True,
        include_logger: bool = True,
        include_function: bool = False,
        timestamp_format: str = "%Y-%m-%dT%H:%M:%S.%fZ",
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_logger = include_logger
        self.include_function = include_function
        self.timestamp_format = timestamp_format

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).strftime(self.timestamp_format)

        log_data["level"] = record.levelname
        if self.include_logger:
            log_data["logger"] = record.name
        log_data["message"] = record.getMessage()

        if self.include_function:
            log_data["function"] = record.funcName

        # 컨텍스트 정보 (ContextFilter에서 추가)
        for attr in self.CONTEXT_ATTRS:
            value = getattr(record, attr, "-")
            if value != "-":
                log_data[attr] = value
        if getattr(record, "extra_context", None):
            log_data.update(record.extra_context)

        # extra 딕셔너리에서 추가 필드 추출
        for key, value in record.__dict__.items():
            if key in self.RESERVED_ATTRS or key.startswith("_"):
                continue
            if key in self.CONTEXT_ATTRS or key == "extra_context":
                continue
            log_data.setdefault(key, value)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, ensure_ascii=False, default=str)


class PrettyJSONFormatter(JSONFormatter):
    """들여쓰기된 JSON 포매터 (개발용)"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = json.loads(super().format(record))
        return json.dumps(log_data, indent=2, ensure_ascii=False, default=str)


def configure_json_logging(
    level: int = logging.INFO,
    output: str = "stdout",
    log_file: Optional[str] = None,
    pretty: bool = False,
    logger_name: Optional[str] = None,
) -> logging.Logger:
    """
    JSON 로깅 설정

    Args:
        level: 로그 레벨
        output: 출력 대상 ("stdout", "stderr", "file")
        log_file: 로그 파일 경로 (output="file"일 때)
        pretty: 들여쓰기 포맷 사용 여부
        logger_name: 설정할 로거 (None이면 루트 로거)

    Returns:
        설정된 로거
    """
    target = logging.getLogger(logger_name)
    target.setLevel(level)

    for handler in target.handlers[:]:
        target.removeHandler(handler)

    formatter = PrettyJSONFormatter() if pretty else JSONFormatter()

    if output == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output == "file" and log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)

    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())
    target.addHandler(handler)

    return target


class LogContext:
    """
    로그 컨텍스트 관리자

    사용법:
        with LogContext(user_id="u1", component="CampaignList"):
            structured.info("Loaded campaigns")
    """

    def __init__(
        self,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
        component: Optional[str] = None,
        action: Optional[str] = None,
        **extra,
    ):
        self.values = {
            "user_id": user_id,
            "session_id": session_id,
            "component": component,
            "action": action,
        }
        self.extra = extra
        self._tokens: List[Any] = []

    def __enter__(self):
        for name, value in self.values.items():
            if value is not None:
                self._tokens.append(_CONTEXT_VARS[name].set(value))
        if self.extra:
            self._tokens.append(_extra_context.set({**get_extra_context(), **self.extra}))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # 설정 역순으로 복원
        while self._tokens:
            token = self._tokens.pop()
            token.var.reset(token)
        return False


@dataclass
class LogEntry:
    """메모리 버퍼에 보관되는 로그 한 건"""
    level: str
    message: str
    context: Dict[str, Any]
    timestamp: str
    environment: str
    error: Optional[BaseException] = None
    stack: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp,
            "environment": self.environment,
            "error": str(self.error) if self.error is not None else None,
            "stack": self.stack,
        }


MonitorCallback = Callable[[str, Dict[str, Any]], Any]


class StructuredLogger:
    """
    구조화된 로거

    최소 레벨 미만은 버리고(critical은 항상 기록), 최근 max_logs건을
    메모리에 보관합니다. error/critical은 monitor 콜백으로 전달됩니다.
    """

    def __init__(
        self,
        name: str,
        min_level: Optional[int] = None,
        monitor: Optional[MonitorCallback] = None,
        max_logs: int = 1000,
        environment: Optional[str] = None,
    ):
        self._logger = logging.getLogger(name)
        self.environment = environment or config.ENVIRONMENT
        if min_level is None:
            min_level = logging.WARNING if self.environment == "production" else logging.DEBUG
        self.min_level = min_level
        self.monitor = monitor
        self.context: Dict[str, Any] = {
            "environment": self.environment,
            "session_id": generate_session_id(),
        }
        self._logs: Deque[LogEntry] = deque(maxlen=max_logs)
        self._tasks = set()

    def set_min_level(self, level: int):
        self.min_level = level

    def should_log(self, level: int) -> bool:
        return level >= self.min_level

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
        force: bool = False,
    ) -> Optional[LogEntry]:
        if not force and not self.should_log(level):
            return None

        merged = {**self.context, **current_context(), **(context or {})}
        entry = LogEntry(
            level=logging.getLevelName(level),
            message=message,
            context=merged,
            timestamp=datetime.now(timezone.utc).isoformat(),
            environment=self.environment,
            error=exception,
        )
        if exception is not None and exception.__traceback__ is not None:
            entry.stack = logging.Formatter().formatException(
                (type(exception), exception, exception.__traceback__)
            )
        self._logs.append(entry)

        exc_info = (type(exception), exception, exception.__traceback__) if exception else None
        self._logger.log(level, message, exc_info=exc_info, extra={"context": merged})

        if level >= logging.ERROR and self.monitor is not None:
            self._forward(message, merged)

        return entry

    def _forward(self, message: str, context: Dict[str, Any]):
        """모니터 콜백 호출 (코루틴이면 실행 중인 루프에 예약)"""
        try:
            result = self.monitor(message, context)
            if asyncio.iscoroutine(result):
                try:
                    loop = asyncio.get_running_loop()
                except RuntimeError:
                    asyncio.run(result)
                else:
                    task = loop.create_task(result)
                    self._tasks.add(task)
                    task.add_done_callback(self._tasks.discard)
        except Exception as e:
            logger.error(f"Failed to forward log to monitor: {e}")

    # ===== 레벨별 메서드 =====

    def debug(self, message: str, **context) -> Optional[LogEntry]:
        return self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context) -> Optional[LogEntry]:
        return self._log(logging.INFO, message, context)

    def warning(self, message: str, **context) -> Optional[LogEntry]:
        return self._log(logging.WARNING, message, context)

    warn = warning

    def error(
        self, message: str, exception: Optional[BaseException] = None, **context
    ) -> Optional[LogEntry]:
        return self._log(logging.ERROR, message, context, exception)

    def critical(
        self, message: str, exception: Optional[BaseException] = None, **context
    ) -> Optional[LogEntry]:
        return self._log(logging.CRITICAL, message, context, exception, force=True)

    def with_context(self, **context) -> "ComponentLogger":
        """컨텍스트가 고정된 로거 반환"""
        return ComponentLogger(self, context)

    # ===== 버퍼 =====

    def get_recent_logs(self, count: int = 50) -> List[LogEntry]:
        if count <= 0:
            return []
        return list(self._logs)[-count:]

    def export_logs(self) -> str:
        return json.dumps([entry.to_dict() for entry in self._logs], indent=2, ensure_ascii=False, default=str)

    # ===== 헬퍼 =====

    def start_timer(self, label: str, **context) -> Callable[[], float]:
        """
        타이머 시작

        Returns:
            호출하면 완료 로그를 남기고 경과 시간(ms)을 반환하는 함수
        """
        start = time.perf_counter()
        self.debug(f"Timer started: {label}", **context)

        def stop() -> float:
            duration = (time.perf_counter() - start) * 1000
            self.info(
                f"Timer completed: {label} ({duration:.2f}ms)",
                **{**context, "duration": duration, "action": "performance_timer"},
            )
            return duration

        return stop

    def log_api_request(self, url: str, method: str, **context) -> Optional[LogEntry]:
        return self.info(
            f"API Request: {method} {url}",
            **{**context, "action": "api_request", "url": url, "method": method},
        )

    def log_api_response(self, url: str, status: int, duration: float, **context) -> Optional[LogEntry]:
        """API 응답 기록 (status >= 400이면 error)"""
        message = f"API Response: {status} {url} ({duration}ms)"
        fields = {**context, "action": "api_response", "url": url, "status": status, "duration": duration}
        if status >= 400:
            return self.error(message, **fields)
        return self.info(message, **fields)

    def log_user_action(self, action: str, **context) -> Optional[LogEntry]:
        return self.info(f"User Action: {action}", **{**context, "action": "user_interaction"})


class ComponentLogger:
    """고정 컨텍스트를 붙여 상위 로거로 위임"""

    def __init__(self, parent: StructuredLogger, context: Dict[str, Any]):
        self.parent = parent
        self.context = context

    def _merge(self, context: Dict[str, Any]) -> Dict[str, Any]:
        return {**self.context, **context}

    def debug(self, message: str, **context):
        return self.parent.debug(message, **self._merge(context))

    def info(self, message: str, **context):
        return self.parent.info(message, **self._merge(context))

    def warning(self, message: str, **context):
        return self.parent.warning(message, **self._merge(context))

    warn = warning

    def error(self, message: str, exception: Optional[BaseException] = None, **context):
        return self.parent.error(message, exception, **self._merge(context))

    def critical(self, message: str, exception: Optional[BaseException] = None, **context):
        return self.parent.critical(message, exception, **self._merge(context))

    def start_timer(self, label: str, **context):
        return self.parent.start_timer(label, **self._merge(context))

    def log_api_request(self, url: str, method: str, **context):
        return self.parent.log_api_request(url, method, **self._merge(context))

    def log_api_response(self, url: str, status: int, duration: float, **context):
        return self.parent.log_api_response(url, status, duration, **self._merge(context))

    def log_user_action(self, action: str, **context):
        return self.parent.log_user_action(action, **self._merge(context))


_loggers: Dict[str, StructuredLogger] = {}


def get_structured_logger(name: str = "app", monitor: Optional[MonitorCallback] = None) -> StructuredLogger:
    """이름별 구조화된 로거 반환"""
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, monitor=monitor)
    elif monitor is not None:
        _loggers[name].monitor = monitor
    return _loggers[name]
