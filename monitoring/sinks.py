"""
Monitoring Sinks

외부 모니터링 서비스 및 분석 이벤트 싱크
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from core.logging_config import setup_logger
from monitoring.metrics import MetricsRegistry

logger = setup_logger(__name__)


class MonitoringSink(ABC):
    """외부 모니터링 싱크 (크래시 리포팅 등)"""

    @abstractmethod
    async def send(self, payload: Dict[str, Any]) -> None:
        ...


class HttpMonitoringSink(MonitoringSink):
    """
    HTTP 모니터링 엔드포인트로 오류 전송

    페이로드: {id, message, category, severity, context, stack}
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: float = 10,
    ):
        self.endpoint = endpoint
        self.api_key = api_key
        self.timeout = timeout

    def _post(self, payload: Dict[str, Any]):
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        response = requests.post(
            self.endpoint,
            json=payload,
            headers=headers,
            timeout=self.timeout,
        )
        response.raise_for_status()

    async def send(self, payload: Dict[str, Any]) -> None:
        await asyncio.to_thread(self._post, payload)
        logger.debug(f"Sent to monitoring service: {payload.get('id')}")


class AnalyticsSink:
    """
    분석 이벤트 싱크

    페이로드: {error_id, category, severity, component, resolved}
    메트릭에 반영하고 구조화 이벤트로 로깅합니다.
    """

    def __init__(self, metrics: MetricsRegistry):
        self.metrics = metrics

    def track(self, payload: Dict[str, Any]) -> None:
        self.metrics.inc_errors(payload["category"], payload["severity"])
        if payload.get("resolved"):
            self.metrics.inc_resolved(payload["category"])
        logger.bind(analytics=payload).info(
            f"Tracking error analytics: {payload['error_id']}"
        )
