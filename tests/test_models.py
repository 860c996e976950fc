import logging

import pytest
from pydantic import ValidationError

from models import DelayBackend, DelayRequest, Settings
from utils import bind_callback, setup_logging, strict_equals


class TestSettings:
    """Test configuration validation and environment loading"""

    def test_defaults(self):
        settings = Settings()
        assert settings.log_level == "WARNING"
        assert settings.delay_backend is DelayBackend.AUTO
        assert settings.timer_daemon is True

    def test_log_level_normalised(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty")

    def test_unknown_backend(self):
        with pytest.raises(ValidationError):
            Settings(delay_backend="process")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("UNDERSCORE_LOG_LEVEL", "info")
        monkeypatch.setenv("UNDERSCORE_DELAY_BACKEND", "THREAD")
        monkeypatch.setenv("UNDERSCORE_TIMER_DAEMON", "false")
        settings = Settings.from_env()
        assert settings.log_level == "INFO"
        assert settings.delay_backend is DelayBackend.THREAD
        assert settings.timer_daemon is False

    def test_from_env_without_variables(self, monkeypatch):
        for name in ("UNDERSCORE_LOG_LEVEL", "UNDERSCORE_DELAY_BACKEND", "UNDERSCORE_TIMER_DAEMON"):
            monkeypatch.delenv(name, raising=False)
        assert Settings.from_env() == Settings()


class TestDelayRequest:
    """Test deferred call validation"""

    def test_invoke(self):
        request = DelayRequest(func=lambda a, b=0: a + b, wait_ms=5, args=(1,), kwargs={"b": 2})
        assert request.invoke() == 3
        assert request.wait_seconds == pytest.approx(0.005)

    def test_negative_wait(self):
        with pytest.raises(ValidationError):
            DelayRequest(func=print, wait_ms=-5)


class TestUtils:
    """Test logging setup and callback helpers"""

    def test_setup_logging_level(self):
        logger = setup_logging("DEBUG")
        assert logger.name == "underscore"
        assert logger.level == logging.DEBUG

    def test_setup_logging_from_settings(self, monkeypatch):
        monkeypatch.setenv("UNDERSCORE_LOG_LEVEL", "ERROR")
        assert setup_logging().level == logging.ERROR

    def test_strict_equals(self):
        assert strict_equals(1, 1)
        assert strict_equals("a", "a")
        assert not strict_equals(1, True)
        assert strict_equals(1, 1.0)
        assert not strict_equals(1.0, True)
        assert not strict_equals(0, False)
        marker = object()
        assert strict_equals(marker, marker)

    def test_bind_callback_trims_arguments(self):
        assert bind_callback(lambda value: value, 1)(1, 2, 3) == 1
        assert bind_callback(lambda value, key: (value, key), 1)(1, 2, 3) == (1, 2)

    def test_bind_callback_leaves_optional_parameters_alone(self):
        assert bind_callback(lambda value, key=None: (value, key), 1)(1, 2, 3) == (1, None)
        assert bind_callback(lambda acc, value, key=None: (acc, value, key), 2)(1, 2, 3) == (1, 2, None)
        assert bind_callback(round, 1)(1.26, 0, [1.26]) == 1

    def test_bind_callback_passes_everything_to_varargs(self):
        assert bind_callback(lambda *args: args, 1)(1, 2, 3) == (1, 2, 3)

    def test_bind_callback_with_builtin(self):
        assert bind_callback(bool, 1)(0, "key", ["collection"]) is False
        assert bind_callback(bool, 1)(5, "key", ["collection"]) is True
