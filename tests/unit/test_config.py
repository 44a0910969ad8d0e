"""Unit tests for settings and logging configuration."""

import logging

from site_capacity.config.settings import Settings, settings
from site_capacity.utils.logger import configure_logging


class TestSettings:

    def test_defaults(self):
        assert settings.MAX_LEVELING_ITERATIONS >= 0
        assert settings.OUTPUT_DATA_DIR.name

    def test_validate_required_settings(self, monkeypatch):
        assert Settings.validate_required_settings() == []
        monkeypatch.setattr(Settings, 'MAX_LEVELING_ITERATIONS', -1)
        assert Settings.validate_required_settings() == ['MAX_LEVELING_ITERATIONS must be >= 0']


class TestConfigureLogging:

    def test_handlers_attached_once(self):
        name = 'site_capacity.tests.logging'
        first = configure_logging(name)
        handlers = list(first.handlers)
        second = configure_logging(name, 'DEBUG')

        assert first is second
        assert second.handlers == handlers
        assert second.level == logging.DEBUG
