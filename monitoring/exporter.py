"""
Prometheus Metrics Exporter

/metrics HTTP 엔드포인트 제공
"""

from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, generate_latest, start_http_server

from core.logging_config import setup_logger

logger = setup_logger(__name__)


class MetricsExporter:
    """Prometheus 메트릭 HTTP Exporter"""

    def __init__(
        self,
        port: int = 9090,
        host: str = "0.0.0.0",
        registry: Optional[CollectorRegistry] = None,
    ):
        self.port = port
        self.host = host
        self.registry = registry if registry is not None else REGISTRY

    def start(self):
        """메트릭 서버 시작"""
        try:
            start_http_server(self.port, addr=self.host, registry=self.registry)
        except OSError as e:
            logger.error(f"Failed to start metrics server: {e}")
            return
        logger.info(f"Prometheus metrics server started on {self.host}:{self.port}")

    def get_metrics_text(self) -> str:
        """메트릭 텍스트 포맷으로 반환"""
        return generate_latest(self.registry).decode("utf-8")
