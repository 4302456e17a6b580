"""Unit tests for logging configuration and application initialization."""

import structlog

from sms_confirmable.core import initialization
from sms_confirmable.core.logging import configure_logging


def test_configure_logging_selects_renderer():
    configure_logging(log_level="DEBUG", json_logs=True)
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    configure_logging(log_level="INFO", json_logs=False)
    processors = structlog.get_config()["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)


def test_initialize_application_runs_setup_steps(mocker):
    load_dotenv = mocker.patch.object(initialization, "load_dotenv")
    configure = mocker.patch.object(initialization, "configure_logging")
    setup = mocker.patch.object(initialization, "setup_i18n")

    initialization.initialize_application()

    load_dotenv.assert_called_once_with(override=False)
    configure.assert_called_once()
    setup.assert_called_once_with()
