"""Tests for logging setup and the store health probe"""
import logging
import time
from unittest.mock import Mock

import pytest
from pythonjsonlogger import jsonlogger

from users_api.core.logging import setup_logging
from users_api.errors import StoreError
from users_api.routes.system import probe_store


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)
    for name in ("users_api.access", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.NOTSET)


class TestSetupLogging:

    def test_default_format(self, restore_root_logger):
        setup_logging(level="debug")

        assert restore_root_logger.level == logging.DEBUG
        formatter = restore_root_logger.handlers[-1].formatter
        assert not isinstance(formatter, jsonlogger.JsonFormatter)

    def test_json_format(self, restore_root_logger):
        setup_logging(level="INFO", fmt="json")

        formatter = restore_root_logger.handlers[-1].formatter
        assert isinstance(formatter, jsonlogger.JsonFormatter)

    def test_access_logger_levels(self, restore_root_logger):
        setup_logging(level="ERROR")

        assert logging.getLogger("users_api.access").level == logging.INFO
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            setup_logging(fmt="xml")


class TestProbeStore:

    @pytest.mark.asyncio
    async def test_probe_ok(self):
        store = Mock()
        assert await probe_store(store, timeout=1.0) is True
        store.ping.assert_called_once()

    @pytest.mark.asyncio
    async def test_probe_store_error(self):
        store = Mock()
        store.ping.side_effect = StoreError("down")
        assert await probe_store(store, timeout=1.0) is False

    @pytest.mark.asyncio
    async def test_probe_timeout(self):
        store = Mock()
        store.ping.side_effect = lambda: time.sleep(0.5)

        start = time.perf_counter()
        assert await probe_store(store, timeout=0.05) is False
        assert time.perf_counter() - start < 0.4
