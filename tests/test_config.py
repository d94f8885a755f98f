# tests/test_config.py
import logging

import pytest
from pydantic import ValidationError

from interview_sim.config.logging_config import configure_logging
from interview_sim.config.settings import Settings, get_settings
from interview_sim.models.interview import MINUTES_PER_QUESTION, InterviewConfig, InterviewStyle


@pytest.fixture
def test_env_vars(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("QUESTION_SERVICE_URL", "http://questions.internal/api")
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "15")
    monkeypatch.setenv("LOG_LEVEL", "warning")


def test_settings_defaults(monkeypatch):
    """Test default settings values."""
    monkeypatch.delenv("QUESTION_SERVICE_URL", raising=False)
    monkeypatch.delenv("REQUEST_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)

    settings = Settings(_env_file=None)
    assert settings.question_service_url == "http://localhost:8000/api"
    assert settings.request_timeout_seconds == 120.0
    assert settings.debug is False


def test_settings_environment_override(test_env_vars):
    """Test environment variable overrides."""
    settings = Settings(_env_file=None)
    assert settings.question_service_url == "http://questions.internal/api"
    assert settings.request_timeout_seconds == 15.0
    assert settings.log_level == "warning"


def test_timeout_must_be_positive(monkeypatch):
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()


def test_configure_logging_sets_level(test_env_vars):
    configure_logging(Settings(_env_file=None))
    assert logging.getLogger().level == logging.WARNING

    configure_logging(Settings(_env_file=None, debug=True))
    assert logging.getLogger().level == logging.DEBUG


def test_configure_logging_unknown_level():
    configure_logging(Settings(_env_file=None, log_level="chatty"))
    assert logging.getLogger().level == logging.INFO


def test_configure_logging_announces_app_name():
    # Attached to the module logger because basicConfig(force=True) resets root handlers
    records: list[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = records.append
    module_logger = logging.getLogger("interview_sim.config.logging_config")
    module_logger.addHandler(handler)
    try:
        configure_logging(Settings(_env_file=None, app_name="mock-interviews", log_level="INFO"))
    finally:
        module_logger.removeHandler(handler)

    assert any("mock-interviews" in r.getMessage() and "INFO" in r.getMessage() for r in records)


class TestInterviewConfig:
    """Validation of the interview configuration."""

    def test_max_questions_derived_from_duration(self):
        config = InterviewConfig(topic="python", duration=30)
        assert config.max_questions == 30 // MINUTES_PER_QUESTION

    def test_short_duration_still_allows_one_question(self):
        assert InterviewConfig(topic="python", duration=2).max_questions == 1

    def test_explicit_max_questions_wins(self):
        assert InterviewConfig(topic="python", duration=60, max_questions=4).max_questions == 4

    def test_accepts_local_format(self):
        config = InterviewConfig.model_validate({
            "topic": "pricing",
            "style": "salary-negotiation",
            "experienceLevel": "senior",
            "companyName": "Acme",
            "duration": 20,
        })
        assert config.style == InterviewStyle.SALARY_NEGOTIATION
        assert config.company_name == "Acme"
        assert config.max_questions == 4

    @pytest.mark.parametrize("data", [
        {"topic": ""},
        {"topic": "python", "duration": 0},
        {"topic": "python", "max_questions": 0},
        {"topic": "python", "style": "interrogation"},
    ])
    def test_invalid_config(self, data):
        with pytest.raises(ValidationError):
            InterviewConfig(**data)

    def test_config_is_frozen(self):
        config = InterviewConfig(topic="python")
        with pytest.raises(ValidationError):
            config.topic = "java"

    def test_category(self):
        config = InterviewConfig(topic="python", style=InterviewStyle.BEHAVIORAL, company_name="Acme")
        category = config.category
        assert (category.topic, category.style, category.company_name) == (
            "python", InterviewStyle.BEHAVIORAL, "Acme"
        )
