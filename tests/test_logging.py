from __future__ import annotations

import json
import logging

import pytest

from uptime_proxy.logging import JSONFormatter, configure_logging
from uptime_proxy.middleware import RequestIDFilter, request_id_var


def _record(message: str = "hello %s", *args: object) -> logging.LogRecord:
    return logging.LogRecord(
        name="uptime_proxy.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=args or ("world",),
        exc_info=None,
    )


def test_json_formatter_includes_request_id() -> None:
    record = _record()
    token = request_id_var.set("abc123")
    try:
        RequestIDFilter().filter(record)
    finally:
        request_id_var.reset(token)

    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "hello world"
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "uptime_proxy.test"
    assert entry["request_id"] == "abc123"


def test_json_formatter_omits_request_id_outside_requests() -> None:
    record = _record()
    RequestIDFilter().filter(record)

    entry = json.loads(JSONFormatter().format(record))

    assert "request_id" not in entry


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize(
    ("log_format", "formatter_type"),
    [("json", JSONFormatter), ("text", logging.Formatter)],
)
def test_configure_logging_installs_single_handler(
    restore_root_logger, log_format: str, formatter_type: type
) -> None:
    configure_logging(log_format=log_format, debug=True)

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, formatter_type)
    assert any(isinstance(f, RequestIDFilter) for f in root.handlers[0].filters)


def test_json_formatter_lifts_domain_context() -> None:
    record = _record()
    record.domain = "zombofant.net"
    record.backend_url = "http://prometheus.test"

    entry = json.loads(JSONFormatter().format(record))

    assert entry["service"] == "uptime-proxy"
    assert entry["domain"] == "zombofant.net"
    assert entry["backend_url"] == "http://prometheus.test"
