"""Tests for settings and logging configuration."""

import json
import logging

import pytest
from pydantic import ValidationError

from idres.config import Settings, get_settings
from idres.logging import JSONFormatter, get_context_logger, setup_logging


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.min_confidence == 50
        assert settings.conflict_min_confidence == 85
        assert settings.similarity_threshold == 0.9
        assert settings.length_window == 3
        assert settings.similarity_metric == "dice"
        assert settings.enable_name_variants is False

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("IDRES_MIN_CONFIDENCE", "70")
        monkeypatch.setenv("IDRES_ENABLE_NAME_VARIANTS", "true")
        monkeypatch.setenv("IDRES_ENVIRONMENT", "production")

        settings = get_settings()

        assert settings.min_confidence == 70
        assert settings.enable_name_variants is True
        assert settings.is_production

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_list_properties(self):
        settings = Settings(
            extra_common_names="Maria Garcia, jose rodriguez,",
            extra_campus_tokens=" amherst ",
        )

        assert settings.extra_common_names_list == ["maria garcia", "jose rodriguez"]
        assert settings.extra_campus_tokens_list == ["amherst"]

    @pytest.mark.parametrize(
        "field,value",
        [
            ("min_confidence", 101),
            ("similarity_threshold", 1.5),
            ("similarity_metric", "cosine"),
            ("log_format", "xml"),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})


class TestLogging:
    """Tests for log setup and structured output."""

    def test_setup_logging_level(self):
        setup_logging(level="debug", log_format="text")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_json_formatter_includes_extra(self):
        record = logging.LogRecord("idres.test", logging.INFO, __file__, 10, "hello", (), None)
        record.entity_id = 3

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["entity_id"] == 3

    def test_context_logger(self, caplog):
        logger = get_context_logger("idres.test", feature="screening")

        with caplog.at_level(logging.INFO, logger="idres.test"):
            logger.info("checked", extra={"matches": 2})

        record = caplog.records[-1]
        assert record.feature == "screening"
        assert record.matches == 2
