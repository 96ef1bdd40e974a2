"""
Prometheus Metrics Collection

오류 처리 파이프라인 메트릭
- 카테고리/심각도별 오류 수
- 복구 시도 결과
- 알림 전송 결과
- 파이프라인 처리 시간
"""

from typing import Any, Dict, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from core.logging_config import setup_logger

logger = setup_logger(__name__)


# 메트릭 버킷 정의
PIPELINE_BUCKETS = (0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class MetricsRegistry:
    """
    Prometheus 메트릭 레지스트리

    테스트에서는 별도 CollectorRegistry를 넘겨 전역 레지스트리와
    충돌하지 않게 합니다.
    """

    def __init__(
        self,
        prefix: str = "error_handler_",
        registry: Optional[CollectorRegistry] = None,
    ):
        self.prefix = prefix
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._initialized = False

    def initialize(self):
        """메트릭 초기화"""
        if self._initialized:
            return

        self._metrics["errors_total"] = Counter(
            f"{self.prefix}errors_total",
            "Total number of handled errors",
            ["category", "severity"],
            registry=self.registry,
        )

        self._metrics["resolved_total"] = Counter(
            f"{self.prefix}resolved_total",
            "Handled errors that ended resolved",
            ["category"],
            registry=self.registry,
        )

        self._metrics["recoveries_total"] = Counter(
            f"{self.prefix}recoveries_total",
            "Recovery attempts by strategy and outcome",
            ["strategy", "outcome"],
            registry=self.registry,
        )

        self._metrics["alerts_total"] = Counter(
            f"{self.prefix}alerts_total",
            "Alert deliveries by channel and outcome",
            ["channel", "outcome"],
            registry=self.registry,
        )

        self._metrics["pipeline_duration_seconds"] = Histogram(
            f"{self.prefix}pipeline_duration_seconds",
            "Duration of the handle_error pipeline",
            buckets=PIPELINE_BUCKETS,
            registry=self.registry,
        )

        self._initialized = True
        logger.debug("Prometheus metrics initialized")

    def get_metric(self, name: str) -> Optional[Any]:
        """메트릭 가져오기"""
        if not self._initialized:
            self.initialize()
        return self._metrics.get(name)

    def inc_errors(self, category: str, severity: str, value: int = 1):
        """오류 카운터 증가"""
        self.get_metric("errors_total").labels(category=category, severity=severity).inc(value)

    def inc_resolved(self, category: str, value: int = 1):
        self.get_metric("resolved_total").labels(category=category).inc(value)

    def inc_recoveries(self, strategy: str, outcome: str, value: int = 1):
        """복구 시도 카운터 증가"""
        self.get_metric("recoveries_total").labels(strategy=strategy, outcome=outcome).inc(value)

    def inc_alerts(self, channel: str, outcome: str, value: int = 1):
        """알림 카운터 증가"""
        self.get_metric("alerts_total").labels(channel=channel, outcome=outcome).inc(value)

    def observe_pipeline(self, duration: float):
        """파이프라인 처리 시간 기록"""
        self.get_metric("pipeline_duration_seconds").observe(duration)

    def sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """현재 샘플 값 조회"""
        if not self._initialized:
            self.initialize()
        return self.registry.get_sample_value(f"{self.prefix}{name}", labels or {})


_metrics: Optional[MetricsRegistry] = None


def get_metrics() -> MetricsRegistry:
    """전역 메트릭 레지스트리 싱글톤 반환"""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
