"""
Recovery Orchestrator

적용 가능한 전략을 등록 순서대로 시도
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, List, Optional

from core.logging_config import setup_logger
from errors.models import ErrorLogEntry
from recovery.registry import RecoveryStrategyRegistry
from recovery.strategies import RecoveryResult, RecoveryStrategy, maybe_await

logger = setup_logger(__name__)


@dataclass
class RecoveryOutcome:
    """복구 시도 요약"""
    attempted: List[str] = field(default_factory=list)
    strategy: Optional[RecoveryStrategy] = None
    result: Optional[RecoveryResult] = None

    @property
    def recovered(self) -> bool:
        return self.strategy is not None


def _coerce_result(value: Any) -> RecoveryResult:
    if isinstance(value, RecoveryResult):
        return value
    if isinstance(value, dict):
        return RecoveryResult(
            success=bool(value.get("success")),
            message=str(value.get("message", "")),
            data=value.get("data"),
        )
    return RecoveryResult(success=bool(value), message=str(value))


class RecoveryOrchestrator:
    """
    복구 오케스트레이터

    전략은 순차적으로 await 됩니다. 뒤 전략의 판단이 앞 전략이 바꾼
    상태에 의존할 수 있으므로 병렬로 실행하지 않습니다.
    """

    def __init__(
        self,
        registry: RecoveryStrategyRegistry,
        timeout: Optional[float] = None,
        metrics=None,
    ):
        self.registry = registry
        self.timeout = timeout or None
        self.metrics = metrics

    def applicable(self, entry: ErrorLogEntry) -> List[RecoveryStrategy]:
        """적용 가능한 전략 (판단 중 예외는 적용 불가로 처리)"""
        strategies = []
        for strategy in self.registry.all():
            try:
                if strategy.can_recover(entry.error, entry.context):
                    strategies.append(strategy)
            except Exception as e:
                logger.error(f"Recovery predicate {strategy.id} failed: {e}")
        return strategies

    async def _run(self, strategy: RecoveryStrategy, entry: ErrorLogEntry) -> RecoveryResult:
        call = maybe_await(strategy.recover(entry.error, entry.context))
        if self.timeout:
            value = await asyncio.wait_for(call, timeout=self.timeout)
        else:
            value = await call
        return _coerce_result(value)

    async def attempt(self, entry: ErrorLogEntry) -> RecoveryOutcome:
        """
        복구 시도

        첫 번째 성공에서 중단합니다. 실패/예외/타임아웃은 기록만 하고
        다음 전략으로 넘어가며 호출자에게 전파하지 않습니다.
        """
        outcome = RecoveryOutcome()
        if entry.error is None:
            return outcome

        strategies = self.applicable(entry)
        if not strategies:
            logger.info(f"No recovery strategy found for error: {entry.id}")
            return outcome

        for strategy in strategies:
            outcome.attempted.append(strategy.id)
            logger.info(f"Attempting recovery with: {strategy.name}")
            try:
                result = await self._run(strategy, entry)
            except asyncio.TimeoutError as e:
                if self.timeout:
                    logger.error(f"Recovery strategy {strategy.name} timed out after {self.timeout}s")
                    self._record(strategy, "timeout")
                else:
                    logger.error(f"Recovery strategy {strategy.name} raised: {e!r}")
                    self._record(strategy, "error")
                continue
            except Exception as e:
                logger.error(f"Recovery strategy {strategy.name} raised: {e}")
                self._record(strategy, "error")
                continue

            if result.success:
                # await 도중 다른 호출이 먼저 해결했을 수 있음
                if not entry.mark_resolved("auto_recovered", f"recovered_by:{strategy.id}"):
                    self._record(strategy, "superseded")
                    logger.info(f"Recovery by {strategy.name} superseded: {entry.id} already resolved")
                    break
                outcome.strategy = strategy
                outcome.result = result
                self._record(strategy, "success")
                logger.info(f"Recovery successful: {result.message}")
                break

            self._record(strategy, "failure")
            logger.info(f"Recovery failed: {result.message}")

        return outcome

    def _record(self, strategy: RecoveryStrategy, outcome: str):
        if self.metrics is not None:
            self.metrics.inc_recoveries(strategy.id, outcome)
