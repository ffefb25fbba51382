"""Tests for the uvicorn logging configuration."""

from uvicorn.config import LOGGING_CONFIG

from sharenote.web.runner import build_log_config


def test_log_config_does_not_mutate_uvicorn_defaults():
    """Test that the returned config is an independent copy."""
    original = LOGGING_CONFIG["formatters"]["default"]["fmt"]
    log_config = build_log_config(debug=False)

    assert log_config["formatters"]["default"]["fmt"] != original
    assert LOGGING_CONFIG["formatters"]["default"]["fmt"] == original


def test_log_level_follows_debug():
    """Test that uvicorn loggers switch to DEBUG in debug mode."""
    assert build_log_config(debug=True)["loggers"]["uvicorn.error"]["level"] == "DEBUG"
    assert build_log_config(debug=False)["loggers"]["uvicorn.error"]["level"] == "INFO"
