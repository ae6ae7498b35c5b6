"""Tests for the shared logger."""
from tsw_tracker.services import delayed_reaction, engine, improvements, ingestion, patterns
from tsw_tracker.utils.logging import build_logger, format_exception, logger

def test_services_share_one_logger():
    """Test that every service logs under the configured service name."""
    for module in (delayed_reaction, engine, improvements, ingestion, patterns):
        assert module.logger is logger

def test_build_logger_from_environment(monkeypatch):
    """Test the service name taken from the environment."""
    monkeypatch.setenv("POWERTOOLS_SERVICE_NAME", "tsw-insights-test")

    built = build_logger()

    assert built.service == "tsw-insights-test"
    assert build_logger(service="other").service == "other"

def test_format_exception_single_line():
    """Test that a traceback is flattened onto one line."""
    try:
        raise ValueError("bad window")
    except ValueError:
        formatted = format_exception(True)

    assert "\n" not in formatted
    assert "ValueError: bad window" in formatted
    assert format_exception(None) is None
