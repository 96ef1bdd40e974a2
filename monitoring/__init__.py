"""
Monitoring Module

메트릭 수집 및 외부 모니터링 연동
"""

from monitoring.metrics import (
    MetricsRegistry,
    get_metrics,
)

from monitoring.exporter import MetricsExporter

from monitoring.sinks import (
    AnalyticsSink,
    HttpMonitoringSink,
    MonitoringSink,
)

from monitoring.performance import (
    observe_operation,
    record_operation,
)

__all__ = [
    # metrics
    "MetricsRegistry",
    "get_metrics",
    # exporter
    "MetricsExporter",
    # sinks
    "AnalyticsSink",
    "HttpMonitoringSink",
    "MonitoringSink",
    # performance
    "observe_operation",
    "record_operation",
]
