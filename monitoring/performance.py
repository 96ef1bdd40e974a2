"""
Slow Operation Observer

임계값을 넘는 작업을 경고 엔트리로 기록
"""

import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

from config import config


def record_operation(
    handler,
    name: str,
    duration: float,
    threshold: Optional[float] = None,
    entry_type: str = "measure",
):
    """
    작업 시간 기록

    Returns:
        임계값 초과 시 생성된 경고 엔트리, 아니면 None
    """
    if not config.PERFORMANCE_MONITORING_ENABLED:
        return None

    threshold = config.SLOW_OPERATION_THRESHOLD_SECONDS if threshold is None else threshold
    if duration <= threshold:
        return None

    metadata: Dict[str, Any] = {
        "duration": duration,
        "entry_type": entry_type,
        "name": name,
    }
    return handler.log_warn(
        f"Slow performance detected: {name}",
        {"component": "Performance", "action": "slow_operation", "metadata": metadata},
    )


@contextmanager
def observe_operation(handler, name: str, threshold: Optional[float] = None):
    """
    작업 관측 컨텍스트 매니저

    사용법:
        with observe_operation(handler, "load_campaigns"):
            load_campaigns()
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        record_operation(handler, name, time.perf_counter() - start_time, threshold)
