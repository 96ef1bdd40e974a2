"""
Recovery Strategy Registry

복구 전략 등록소
"""

from typing import Dict, Iterable, List, Optional

from core.logging_config import setup_logger
from recovery.strategies import RecoveryStrategy

logger = setup_logger(__name__)


class RecoveryStrategyRegistry:
    """
    복구 전략 레지스트리

    등록 순서가 곧 평가 순서입니다. 같은 ID로 다시 등록하면
    기존 위치를 유지한 채 교체됩니다.
    """

    def __init__(self, strategies: Optional[Iterable[RecoveryStrategy]] = None):
        self._strategies: Dict[str, RecoveryStrategy] = {}
        for strategy in strategies or []:
            self.register(strategy)

    def register(self, strategy: RecoveryStrategy):
        """전략 등록 (삽입 또는 교체)"""
        if not strategy.id or not strategy.name:
            raise ValueError("Recovery strategy requires a non-empty id and name")

        replaced = strategy.id in self._strategies
        self._strategies[strategy.id] = strategy
        if replaced:
            logger.info(f"Replaced recovery strategy: {strategy.name}")
        else:
            logger.debug(f"Registered recovery strategy: {strategy.name}")

    def unregister(self, strategy_id: str) -> bool:
        """전략 해제"""
        if strategy_id in self._strategies:
            del self._strategies[strategy_id]
            logger.info(f"Unregistered recovery strategy: {strategy_id}")
            return True
        return False

    def get(self, strategy_id: str) -> Optional[RecoveryStrategy]:
        return self._strategies.get(strategy_id)

    def all(self) -> List[RecoveryStrategy]:
        """등록 순서대로 반환"""
        return list(self._strategies.values())

    def __len__(self) -> int:
        return len(self._strategies)

    def __contains__(self, strategy_id: str) -> bool:
        return strategy_id in self._strategies
