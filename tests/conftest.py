"""
테스트 설정 및 픽스처
"""

import os

import pytest

# 테스트 환경 설정 - 모든 import 이전에 설정
os.environ["ENVIRONMENT"] = "test"
os.environ["INSTALL_GLOBAL_HOOKS"] = "false"

from prometheus_client import CollectorRegistry

from alerts.dispatcher import AlertChannel, AlertDispatcher, AlertRecipients, AlertType
from errors.models import ErrorContext
from errors.handler import ErrorHandler
from monitoring.metrics import MetricsRegistry
from monitoring.sinks import AnalyticsSink, MonitoringSink
from recovery.strategies import RecoveryResult, RecoveryStrategy, build_default_strategies


class FakeChannel(AlertChannel):
    """전송 내역을 기록하는 인메모리 알림 채널"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, recipient, entry):
        self.sent.append((recipient, entry.id))
        if self.fail:
            raise RuntimeError("channel down")
        return "ok"


class FakeSink(MonitoringSink):
    """페이로드를 기록하는 모니터링 싱크"""

    def __init__(self):
        self.payloads = []

    async def send(self, payload):
        self.payloads.append(payload)


def make_strategy(strategy_id, success=True, matches=True, calls=None, raises=None):
    """테스트용 전략 생성"""

    def can_recover(error, context):
        return matches

    async def recover(error, context):
        if calls is not None:
            calls.append(strategy_id)
        if raises is not None:
            raise raises
        return RecoveryResult(success, f"{strategy_id} {'ok' if success else 'failed'}")

    return RecoveryStrategy(
        id=strategy_id,
        name=f"{strategy_id} strategy",
        description="test strategy",
        can_recover=can_recover,
        recover=recover,
    )


@pytest.fixture
def metrics():
    """격리된 Prometheus 레지스트리"""
    return MetricsRegistry(registry=CollectorRegistry())


@pytest.fixture
def channels():
    return {
        AlertType.EMAIL: FakeChannel(),
        AlertType.SLACK: FakeChannel(),
        AlertType.WEBHOOK: FakeChannel(),
        AlertType.SMS: FakeChannel(),
    }


@pytest.fixture
def dispatcher(channels, metrics):
    return AlertDispatcher(channels=channels, recipients=AlertRecipients(), metrics=metrics)


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def fast_strategies():
    """대기 시간이 없는 기본 전략"""
    return build_default_strategies(network_retry_delay=0, auth_retry_delay=0)


@pytest.fixture
def handler(fast_strategies, dispatcher, sink, metrics):
    """격리된 오류 핸들러"""
    h = ErrorHandler(
        strategies=fast_strategies,
        dispatcher=dispatcher,
        monitoring_sinks=[sink],
        analytics_sink=AnalyticsSink(metrics),
        metrics=metrics,
        install_global_hooks=False,
    )
    yield h
    h.hooks.uninstall()


@pytest.fixture
def context():
    return ErrorContext(component="CampaignList", action="load")


@pytest.fixture
def strategy_factory():
    return make_strategy


@pytest.fixture
def channel_factory():
    return FakeChannel
