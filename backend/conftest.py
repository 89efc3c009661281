"""Root conftest: load test environment variables and route structlog through stdlib."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import clear_log_context

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# stdlib routing lets caplog see ledger log lines
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    clear_log_context()
    yield
    clear_log_context()
