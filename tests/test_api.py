import httpx
import pytest
from fastapi.testclient import TestClient

from accounting.controller import AccountingController
from accounting.metrics import METRIC_KEYS
from app.core.config import Settings
from app.main import create_app
from observability.collector import AccessLogCollector


@pytest.fixture
def controller():
    return AccountingController()


@pytest.fixture
def client_app(controller, recording_sink):
    return create_app(
        controller=controller,
        collector=AccessLogCollector(sink=recording_sink),
        expose_headers=True,
    )


def _assert_metrics(metrics):
    assert set(metrics) == set(METRIC_KEYS)
    for value in metrics.values():
        assert int(value) >= 0


def test_health(client_app):
    response = TestClient(client_app).get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["accounting_enabled"] is True


def test_plain_request_is_accounted(client_app, recording_sink):
    response = TestClient(client_app).get("/v1/work", params={"spin_ms": 20})

    assert response.status_code == 200
    record = recording_sink.records[-1]
    assert record.path == "/v1/work"
    assert record.status_code == 200
    _assert_metrics(record.metrics)
    assert int(record.metrics["ACC_time"]) >= 20000
    assert response.headers["X-Accounting-time"] == record.metrics["ACC_time"]


def test_redirected_request_publishes_on_tail(client_app, recording_sink):
    """Test: metrics are published on the last internal redirect."""
    response = TestClient(client_app).get("/v1/work", params={"redirects": 2, "subrequests": 1})

    assert response.status_code == 200
    kinds = [hop["kind"] for hop in response.json()["chain"]]
    assert kinds == ["main", "subrequest", "redirect", "redirect"]

    record = recording_sink.records[-1]
    assert record.path == "/v1/work/redirect/1"
    _assert_metrics(record.metrics)


def test_child_process_is_reaped_and_counted(client_app, recording_sink):
    response = TestClient(client_app).get("/v1/work", params={"spawn_child": True})

    assert response.status_code == 200
    assert response.json()["child_exit_code"] == 0
    _assert_metrics(recording_sink.records[-1].metrics)


def test_failing_route_is_still_accounted(client_app, recording_sink):
    @client_app.get("/boom")
    def boom():
        raise RuntimeError("boom")

    response = TestClient(client_app, raise_server_exceptions=False).get("/boom")

    assert response.status_code == 500
    record = recording_sink.records[-1]
    assert record.status_code == 500
    assert record.error == "RuntimeError: boom"
    _assert_metrics(record.metrics)


def test_disabled_accounting_logs_without_metrics(controller, client_app, recording_sink):
    controller.enabled = False

    response = TestClient(client_app).get("/v1/work")

    assert response.status_code == 200
    assert recording_sink.records[-1].metrics == {}
    assert "X-Accounting-time" not in response.headers


def test_invalid_query_is_rejected(client_app, recording_sink):
    response = TestClient(client_app).get("/v1/work", params={"redirects": 99})

    assert response.status_code == 422
    assert recording_sink.records[-1].status_code == 422


@pytest.mark.asyncio
async def test_concurrent_transactions_are_independent(client_app, recording_sink):
    transport = httpx.ASGITransport(app=client_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        first = await client.get("/v1/work", params={"redirects": 1})
        second = await client.get("/v1/work")

    assert first.status_code == second.status_code == 200
    paths = [record.path for record in recording_sink.records]
    assert paths == ["/v1/work/redirect/0", "/v1/work"]
    for record in recording_sink.records:
        _assert_metrics(record.metrics)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("REQUEST_ACCOUNTING_ACCESS_LOG_FORMAT", "json")
    monkeypatch.setenv("REQUEST_ACCOUNTING_REAP_CHILDREN", "false")

    settings = Settings(_env_file=None)

    assert settings.access_log_format == "json"
    assert settings.reap_children is False
    assert settings.accounting_enabled is True
