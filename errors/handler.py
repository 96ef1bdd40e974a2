"""
Error Handler

오류 처리 파이프라인의 공개 진입점

    분류 → 저장 → 외부 모니터링 → 자동 복구 → 알림(high/critical) → 분석

파이프라인 내부 실패(복구 전략, 알림 전송, 싱크 오류)는 모두 여기서
로깅하고 삼킵니다. 원래 오류만 기록되며 오류 처리가 새로운
처리되지 않은 오류의 원인이 되어서는 안 됩니다.
"""

import asyncio
import dataclasses
import time
import traceback
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from config import config as default_config
from core.logging_config import setup_logger
from errors.classifier import ErrorClassifier
from errors.hooks import ConnectivityMonitor, GlobalErrorHooks
from errors.models import (
    ErrorCategory,
    ErrorContext,
    ErrorLogEntry,
    ErrorSeverity,
    LogLevel,
    utcnow,
)
from errors.store import ErrorLog
from alerts.dispatcher import (
    AlertDispatcher,
    AlertRecipients,
    ErrorAlert,
    build_default_channels,
)
from monitoring.metrics import MetricsRegistry, get_metrics
from monitoring.sinks import AnalyticsSink, HttpMonitoringSink, MonitoringSink
from recovery.orchestrator import RecoveryOrchestrator
from recovery.registry import RecoveryStrategyRegistry
from recovery.strategies import RecoveryStrategy, build_default_strategies, maybe_await

logger = setup_logger(__name__)

ContextLike = Union[ErrorContext, Mapping[str, Any], None]

ALERT_SEVERITIES = (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL)

LEVEL_TAGS = {
    LogLevel.WARN: "warning",
    LogLevel.INFO: "info",
    LogLevel.DEBUG: "debug",
}


def _coerce_context(context) -> ErrorContext:
    try:
        return ErrorContext.coerce(context)
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Invalid error context {context!r}, using empty context: {e}")
        return ErrorContext()


def _format_stack(error: BaseException) -> Optional[str]:
    if error.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


class ErrorHandler:
    """
    오류 핸들러

    모든 협력 객체는 주입할 수 있으며, 생략하면 설정값으로 기본 구성을
    만듭니다. 테스트는 격리된 인스턴스를 직접 생성합니다.
    """

    def __init__(
        self,
        store: Optional[ErrorLog] = None,
        classifier: Optional[ErrorClassifier] = None,
        strategies: Optional[Iterable[RecoveryStrategy]] = None,
        registry: Optional[RecoveryStrategyRegistry] = None,
        dispatcher: Optional[AlertDispatcher] = None,
        monitoring_sinks: Optional[List[MonitoringSink]] = None,
        analytics_sink: Optional[AnalyticsSink] = None,
        metrics: Optional[MetricsRegistry] = None,
        connectivity: Optional[ConnectivityMonitor] = None,
        install_global_hooks: Optional[bool] = None,
        settings=None,
    ):
        self.settings = settings or default_config
        self.metrics = metrics or get_metrics()

        self.connectivity = connectivity or ConnectivityMonitor()
        self.connectivity.subscribe(self._on_connectivity_change)

        self.store = store or ErrorLog()
        self.classifier = classifier or ErrorClassifier(
            is_online=lambda: self.connectivity.is_online
        )

        if registry is None:
            registry = RecoveryStrategyRegistry(
                build_default_strategies() if strategies is None else strategies
            )
        self.registry = registry
        self.orchestrator = RecoveryOrchestrator(
            registry,
            timeout=self.settings.RECOVERY_TIMEOUT_SECONDS,
            metrics=self.metrics,
        )

        self.dispatcher = dispatcher or AlertDispatcher(
            channels=build_default_channels(self.settings),
            recipients=AlertRecipients.from_config(self.settings),
            timeout=self.settings.ALERT_TIMEOUT_SECONDS,
            metrics=self.metrics,
        )

        if monitoring_sinks is None:
            monitoring_sinks = []
            if self.settings.MONITORING_ENDPOINT:
                monitoring_sinks.append(HttpMonitoringSink(
                    self.settings.MONITORING_ENDPOINT,
                    api_key=self.settings.MONITORING_API_KEY,
                ))
        self.monitoring_sinks = list(monitoring_sinks)
        self.sink_timeout = self.settings.SINK_TIMEOUT_SECONDS or None

        if analytics_sink is None and self.settings.ANALYTICS_ENABLED:
            analytics_sink = AnalyticsSink(self.metrics)
        self.analytics_sink = analytics_sink

        self.hooks = GlobalErrorHooks(self)
        if install_global_hooks is None:
            install_global_hooks = self.settings.INSTALL_GLOBAL_HOOKS
        if install_global_hooks:
            self.hooks.install()

        logger.info(f"Error handler initialized ({len(self.registry)} recovery strategies)")

    # ===== 핵심 처리 =====

    async def handle_error(
        self,
        error: Any,
        context: ContextLike = None,
        category: Optional[Union[ErrorCategory, str]] = None,
        severity: Optional[Union[ErrorSeverity, str]] = None,
    ) -> Optional[ErrorLogEntry]:
        """
        오류 처리 파이프라인 실행

        절대 예외를 던지지 않습니다 (취소는 그대로 전파).

        Args:
            error: 예외 (예외가 아니면 Exception으로 감쌈)
            context: ErrorContext 또는 딕셔너리
            category: 카테고리 (없으면 AppError 속성, 그다음 system)
            severity: 심각도 (없으면 AppError 속성, 그다음 medium)

        Returns:
            기록된 엔트리 (엔트리 생성 자체가 실패하면 None)
        """
        started = time.perf_counter()
        try:
            entry = self._create_error_entry(error, context, category, severity)
            self.store.store(entry)
        except Exception:
            logger.exception("Failed to record error entry")
            return None

        self._echo(entry)

        await self._send_to_external_monitoring(entry)
        await self._attempt_recovery(entry)

        if entry.severity in ALERT_SEVERITIES:
            await self._send_alerts(entry)

        self._track_analytics(entry)

        try:
            self.metrics.observe_pipeline(time.perf_counter() - started)
        except Exception as e:
            logger.error(f"Failed to record pipeline duration: {e}")

        return entry

    def _create_error_entry(self, error, context, category, severity) -> ErrorLogEntry:
        if not isinstance(error, BaseException):
            error = Exception(str(error))

        ctx = dataclasses.replace(_coerce_context(context), timestamp=utcnow())
        classification = self.classifier.classify(error, ctx, category, severity)
        ctx.category = classification.category

        return ErrorLogEntry(
            message=str(error) or type(error).__name__,
            level=LogLevel.ERROR,
            error=error,
            context=ctx,
            stack=_format_stack(error),
            category=classification.category,
            severity=classification.severity,
            tags=classification.tags,
        )

    def _echo(self, entry: ErrorLogEntry):
        if not self.settings.DEBUG:
            return
        logger.bind(context=entry.context.to_dict()).error(
            f"{entry.category.value.upper()}: {entry.message}"
            + (f"\n{entry.stack}" if entry.stack else "")
        )

    async def _send_to_external_monitoring(self, entry: ErrorLogEntry):
        payload = entry.monitoring_payload()
        for sink in self.monitoring_sinks:
            try:
                call = maybe_await(sink.send(payload))
                if self.sink_timeout:
                    await asyncio.wait_for(call, timeout=self.sink_timeout)
                else:
                    await call
            except asyncio.TimeoutError:
                logger.error(f"External monitoring timed out for {entry.id}")
            except Exception as e:
                logger.error(f"Failed to send to external monitoring: {e}")

    async def _attempt_recovery(self, entry: ErrorLogEntry):
        try:
            outcome = await self.orchestrator.attempt(entry)
        except Exception:
            logger.exception(f"Recovery pipeline failed for {entry.id}")
            return

        if outcome.recovered:
            self.log_info(
                f"Error auto-recovered using {outcome.strategy.name}",
                {
                    "component": "ErrorRecovery",
                    "action": "recovery_success",
                    "metadata": {
                        "original_error_id": entry.id,
                        "strategy": outcome.strategy.name,
                        "result": outcome.result.message,
                    },
                },
            )

    async def _send_alerts(self, entry: ErrorLogEntry):
        try:
            await self.dispatcher.dispatch(entry)
        except Exception:
            logger.exception(f"Alert dispatch failed for {entry.id}")

    def _track_analytics(self, entry: ErrorLogEntry):
        if self.analytics_sink is None:
            return
        try:
            self.analytics_sink.track(entry.analytics_payload())
        except Exception as e:
            logger.error(f"Failed to track error analytics: {e}")

    # ===== 로그 레벨 헬퍼 =====

    async def log_error(self, message: str, context: ContextLike = None) -> Optional[ErrorLogEntry]:
        """메시지로 오류를 만들어 전체 파이프라인 실행"""
        return await self.handle_error(Exception(message), context)

    def _log_entry(self, level: LogLevel, message: str, context: ContextLike) -> ErrorLogEntry:
        ctx = _coerce_context(context)
        classification = self.classifier.classify(
            None, ctx, ErrorCategory.SYSTEM, ErrorSeverity.LOW, message=message
        )
        now = utcnow()
        entry = ErrorLogEntry(
            message=message,
            level=level,
            context=ctx,
            category=classification.category,
            severity=classification.severity,
            resolved=True,
            created_at=now,
            resolved_at=now,
            tags=[LEVEL_TAGS[level]] + [t for t in classification.tags if t != LEVEL_TAGS[level]],
        )
        self.store.store(entry)
        return entry

    def log_warn(self, message: str, context: ContextLike = None) -> ErrorLogEntry:
        """경고 기록 (복구/알림 없음, 생성 시 해결 상태)"""
        entry = self._log_entry(LogLevel.WARN, message, context)
        if self.settings.DEBUG:
            logger.warning(f"WARNING: {message}")
        return entry

    def log_info(self, message: str, context: ContextLike = None) -> ErrorLogEntry:
        """정보 기록"""
        entry = self._log_entry(LogLevel.INFO, message, context)
        if self.settings.DEBUG:
            logger.info(f"INFO: {message}")
        return entry

    def log_debug(self, message: str, context: ContextLike = None) -> ErrorLogEntry:
        """디버그 기록"""
        entry = self._log_entry(LogLevel.DEBUG, message, context)
        logger.debug(f"DEBUG: {message}")
        return entry

    def _on_connectivity_change(self, online: bool):
        if online:
            self.log_info("Network connection restored", {"component": "Network"})
        else:
            self.log_warn("Network connection lost", {"component": "Network"})

    # ===== 관리 인터페이스 =====

    def get_error_logs(
        self,
        category: Optional[Union[ErrorCategory, str]] = None,
        severity: Optional[Union[ErrorSeverity, str]] = None,
        resolved: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[ErrorLogEntry]:
        return self.store.query(category=category, severity=severity, resolved=resolved, limit=limit)

    def get_error_stats(self) -> Dict[str, Any]:
        return self.store.stats()

    def resolve_error(self, error_id: str) -> bool:
        return self.store.resolve_by_id(error_id)

    def clear_error_logs(self):
        """로그 삭제 (알림 감사 기록은 유지)"""
        self.store.clear()

    def export_error_logs(self) -> str:
        return self.store.export_json()

    def get_recovery_strategies(self) -> List[RecoveryStrategy]:
        return self.registry.all()

    def add_recovery_strategy(self, strategy: RecoveryStrategy):
        self.registry.register(strategy)
        logger.info(f"Added recovery strategy: {strategy.name}")

    @property
    def alerts(self) -> List[ErrorAlert]:
        return self.dispatcher.alerts

    def get_alerts(self, error_id: Optional[str] = None) -> List[ErrorAlert]:
        return self.dispatcher.get_alerts(error_id)


# 전역 핸들러
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """오류 핸들러 싱글톤 반환"""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler
