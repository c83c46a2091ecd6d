"""
Pytest configuration for the configkit test suite.

Provides:
- A Loguru-to-standard-logging bridge so ``caplog`` sees configkit records
- Sample configuration fixtures built from the models in ``tests/utils.py``
- Bound and free TCP port fixtures for the port probe rule
- Settings cache isolation around environment-dependent tests
"""

import contextlib
import importlib.util
import logging
import socket
import sys
from pathlib import Path
from typing import List

src_path = str(Path(__file__).parent.parent / "src")
sys.path.insert(0, src_path)

import pytest
from loguru import logger
from configkit.settings import get_settings
from tests.utils import AppConfig, DatabaseConfig

HYPOTHESIS_AVAILABLE = importlib.util.find_spec("hypothesis") is not None

collect_ignore: List[str] = []

if not HYPOTHESIS_AVAILABLE:  # pragma: no cover - exercised when Hypothesis is absent
    collect_ignore.extend([
        "configkit/test_properties.py",
    ])


# ============================================================================
# LOGURU INTEGRATION
# ============================================================================

@pytest.fixture(autouse=True)
def capture_loguru_logs(caplog):
    """Route configkit's Loguru records into pytest's caplog."""

    class PropagateHandler(logging.Handler):
        def emit(self, record):
            logging.getLogger(record.name or "configkit").handle(record)

    caplog.set_level(logging.DEBUG)
    logger.enable("configkit")
    handler_id = logger.add(PropagateHandler(), format="{message}", level="DEBUG")

    yield

    with contextlib.suppress(ValueError):
        logger.remove(handler_id)
    logger.disable("configkit")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Start every test from settings read out of a clean environment."""
    for variable in (
        "CONFIGKIT_ENVIRONMENT",
        "APP_ENV",
        "ENVIRONMENT",
        "CONFIGKIT_LOG_LEVEL",
        "CONFIGKIT_URL_TIMEOUT",
        "CONFIGKIT_DISABLE_AUTO_LOGGING",
    ):
        monkeypatch.delenv(variable, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# SAMPLE CONFIGURATION OBJECTS
# ============================================================================

@pytest.fixture
def database_config() -> DatabaseConfig:
    return DatabaseConfig(
        connection_string="Server=localhost;Database=app",
        max_pool_size=100,
        use_tls=False,
    )


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(name="Orders", port=8080)


# ============================================================================
# NETWORK FIXTURES
# ============================================================================

@pytest.fixture
def bound_port():
    """A loopback port held by a listening socket for the duration of the test."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        yield listener.getsockname()[1]


@pytest.fixture
def free_port() -> int:
    """An ephemeral loopback port that was free a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]
