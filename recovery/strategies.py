"""
Recovery Strategies

복구 전략 정의 및 기본 전략
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Union

from core.logging_config import setup_logger
from errors.models import ErrorCategory, ErrorContext, utcnow

logger = setup_logger(__name__)


@dataclass
class RecoveryResult:
    """복구 시도 결과"""
    success: bool
    message: str
    data: Any = None


Predicate = Callable[[BaseException, ErrorContext], bool]
RecoverFn = Callable[
    [BaseException, ErrorContext],
    Union[RecoveryResult, Awaitable[RecoveryResult]],
]
# 호스트 애플리케이션이 주입하는 복구 동작
Action = Callable[[BaseException, ErrorContext], Any]


@dataclass
class RecoveryStrategy:
    """
    이름 있는 복구 전략

    can_recover는 부작용이 없어야 하며 recover만 실제 동작을 수행합니다.
    max_retries/retry_delay(초)는 전략 스스로 재시도 루프에서 사용하며
    오케스트레이터는 재시도하지 않습니다.
    """
    id: str
    name: str
    description: str
    can_recover: Predicate
    recover: RecoverFn
    max_retries: int = 1
    retry_delay: float = 0.0


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def retry_with_backoff(
    action: Action,
    error: BaseException,
    context: ErrorContext,
    max_retries: int,
    base_delay: float,
    exponential_base: float = 2.0,
) -> Any:
    """
    지수 백오프 재시도

    마지막 시도의 예외는 그대로 전파됩니다.
    """
    attempts = max(1, max_retries)
    for attempt in range(attempts):
        try:
            return await maybe_await(action(error, context))
        except Exception as e:
            if attempt == attempts - 1:
                raise
            delay = base_delay * (exponential_base ** attempt)
            logger.warning(
                f"Recovery action failed on attempt {attempt + 1}/{attempts}: {e}. "
                f"Retrying in {delay:.2f}s..."
            )
            await asyncio.sleep(delay)


def _message(error: BaseException) -> str:
    return str(error).lower()


def _category_is(context: ErrorContext, category: ErrorCategory) -> bool:
    return context.category == category


# ===== 네트워크 재시도 =====

def network_retry_strategy(
    retry_request: Optional[Action] = None,
    max_retries: int = 3,
    retry_delay: float = 1.0,
) -> RecoveryStrategy:
    """실패한 네트워크 요청 재시도"""

    def can_recover(error: BaseException, context: ErrorContext) -> bool:
        message = _message(error)
        return (
            "fetch" in message
            or "network" in message
            or "timeout" in message
            or _category_is(context, ErrorCategory.API)
        )

    async def recover(error: BaseException, context: ErrorContext) -> RecoveryResult:
        if retry_request is None:
            await asyncio.sleep(retry_delay)
            return RecoveryResult(True, "Network request retried successfully")
        try:
            data = await retry_with_backoff(
                retry_request, error, context, max_retries, retry_delay
            )
        except Exception as e:
            return RecoveryResult(False, f"Retry failed: {e}")
        return RecoveryResult(True, "Network request retried successfully", data)

    return RecoveryStrategy(
        id="network_retry",
        name="Network Retry Strategy",
        description="Automatically retry failed network requests",
        can_recover=can_recover,
        recover=recover,
        max_retries=max_retries,
        retry_delay=retry_delay,
    )


# ===== 인증 갱신 =====

def auth_refresh_strategy(
    refresh_auth: Optional[Action] = None,
    max_retries: int = 1,
    retry_delay: float = 0.5,
) -> RecoveryStrategy:
    """인증 오류 시 토큰 갱신"""

    def can_recover(error: BaseException, context: ErrorContext) -> bool:
        message = _message(error)
        return (
            "401" in message
            or "unauthorized" in message
            or _category_is(context, ErrorCategory.AUTH)
        )

    async def recover(error: BaseException, context: ErrorContext) -> RecoveryResult:
        logger.info("Refreshing authentication token...")
        if refresh_auth is None:
            await asyncio.sleep(retry_delay)
            return RecoveryResult(True, "Authentication refreshed")
        try:
            data = await retry_with_backoff(
                refresh_auth, error, context, max_retries, retry_delay
            )
        except Exception as e:
            return RecoveryResult(False, f"Authentication refresh failed: {e}")
        return RecoveryResult(True, "Authentication refreshed", data)

    return RecoveryStrategy(
        id="auth_refresh",
        name="Authentication Refresh Strategy",
        description="Refresh authentication tokens on auth errors",
        can_recover=can_recover,
        recover=recover,
        max_retries=max_retries,
        retry_delay=retry_delay,
    )


# ===== 데이터 폴백 =====

def data_fallback_strategy(load_fallback: Optional[Action] = None) -> RecoveryStrategy:
    """기본 데이터 소스 실패 시 캐시/기본 데이터 사용"""

    def can_recover(error: BaseException, context: ErrorContext) -> bool:
        return _category_is(context, ErrorCategory.DATA) or "fetch" in (context.action or "")

    async def recover(error: BaseException, context: ErrorContext) -> RecoveryResult:
        logger.info("Using cached data fallback...")
        if load_fallback is None:
            return RecoveryResult(
                True,
                "Using cached data",
                {"fallback": True, "timestamp": utcnow().isoformat()},
            )
        try:
            data = await maybe_await(load_fallback(error, context))
        except Exception as e:
            return RecoveryResult(False, f"Fallback data not available: {e}")
        if data is None:
            return RecoveryResult(False, "Fallback data not available")
        return RecoveryResult(True, "Using cached data", data)

    return RecoveryStrategy(
        id="data_fallback",
        name="Data Fallback Strategy",
        description="Use cached or default data when primary data source fails",
        can_recover=can_recover,
        recover=recover,
        max_retries=1,
        retry_delay=0.0,
    )


# ===== UI 리셋 =====

def ui_reset_strategy(reset_ui: Optional[Action] = None) -> RecoveryStrategy:
    """렌더링 오류 복구를 위한 UI 상태 초기화"""

    def can_recover(error: BaseException, context: ErrorContext) -> bool:
        message = _message(error)
        return (
            _category_is(context, ErrorCategory.UI)
            or "render" in message
            or "component" in message
        )

    async def recover(error: BaseException, context: ErrorContext) -> RecoveryResult:
        logger.info("Resetting UI state...")
        if reset_ui is not None:
            try:
                await maybe_await(reset_ui(error, context))
            except Exception as e:
                return RecoveryResult(False, f"UI reset failed: {e}")
        return RecoveryResult(True, "UI state reset")

    return RecoveryStrategy(
        id="ui_reset",
        name="UI Reset Strategy",
        description="Reset UI state to recover from rendering errors",
        can_recover=can_recover,
        recover=recover,
        max_retries=1,
        retry_delay=0.0,
    )


def build_default_strategies(
    retry_request: Optional[Action] = None,
    refresh_auth: Optional[Action] = None,
    load_fallback: Optional[Action] = None,
    reset_ui: Optional[Action] = None,
    network_retry_delay: float = 1.0,
    auth_retry_delay: float = 0.5,
) -> List[RecoveryStrategy]:
    """기본 전략 (등록 순서가 우선순위)"""
    return [
        network_retry_strategy(retry_request, retry_delay=network_retry_delay),
        auth_refresh_strategy(refresh_auth, retry_delay=auth_retry_delay),
        data_fallback_strategy(load_fallback),
        ui_reset_strategy(reset_ui),
    ]
