import pytest
from loguru import logger

from nexus.core.logging import (
    StructuredLogger,
    log_execution_time,
    log_http_request,
    probe_id_var,
)


@pytest.fixture
def records():
    captured = []
    handler_id = logger.add(lambda msg: captured.append(msg.record), level="DEBUG")
    yield captured
    logger.remove(handler_id)


@pytest.mark.unit
class TestStructuredLogger:
    def test_binds_probe_id(self, records):
        token = probe_id_var.set("abc123")
        try:
            StructuredLogger.info("hello", lead="Acme")
        finally:
            probe_id_var.reset(token)

        assert records[-1]["extra"]["probe_id"] == "abc123"
        assert records[-1]["extra"]["lead"] == "Acme"

    def test_drops_none_values(self, records):
        StructuredLogger.warning("no probe", lead=None)

        assert "probe_id" not in records[-1]["extra"]
        assert "lead" not in records[-1]["extra"]


@pytest.mark.unit
class TestLogHttpRequest:
    def test_success_is_debug(self, records):
        log_http_request("GET", "https://store/leads", status_code=200, duration=0.12345)

        assert records[-1]["level"].name == "DEBUG"
        assert records[-1]["extra"]["duration"] == 0.123

    def test_failure_is_error(self, records):
        log_http_request("POST", "https://store/leads", status_code=500)
        assert records[-1]["level"].name == "ERROR"

    def test_missing_status_is_error(self, records):
        log_http_request("POST", "https://store/leads", error="timeout")

        assert records[-1]["level"].name == "ERROR"
        assert records[-1]["extra"]["error"] == "timeout"


@pytest.mark.unit
class TestLogExecutionTime:
    @pytest.mark.asyncio
    async def test_returns_result(self, records):
        @log_execution_time
        async def work():
            return 42

        assert await work() == 42
        assert records[-1]["extra"]["function"] == "work"

    @pytest.mark.asyncio
    async def test_reraises(self, records):
        @log_execution_time
        async def broken():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await broken()
        errors = [r for r in records if r["level"].name == "ERROR"]
        assert errors[-1]["extra"]["error"] == "boom"
        assert records[-1]["extra"]["function"] == "broken"

    def test_rejects_sync_functions(self):
        with pytest.raises(TypeError):
            log_execution_time(lambda: None)
