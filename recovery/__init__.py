"""
Recovery Module

자동 복구 전략 및 오케스트레이션
"""

from recovery.strategies import (
    RecoveryResult,
    RecoveryStrategy,
    auth_refresh_strategy,
    build_default_strategies,
    data_fallback_strategy,
    network_retry_strategy,
    retry_with_backoff,
    ui_reset_strategy,
)

from recovery.registry import RecoveryStrategyRegistry

from recovery.orchestrator import (
    RecoveryOrchestrator,
    RecoveryOutcome,
)

__all__ = [
    # strategies
    "RecoveryResult",
    "RecoveryStrategy",
    "auth_refresh_strategy",
    "build_default_strategies",
    "data_fallback_strategy",
    "network_retry_strategy",
    "retry_with_backoff",
    "ui_reset_strategy",
    # registry
    "RecoveryStrategyRegistry",
    # orchestrator
    "RecoveryOrchestrator",
    "RecoveryOutcome",
]
