"""Tests for taskbind.core.logging."""

import json

import structlog

from taskbind.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_from_settings,
    configure_logging,
    ensure_configured,
    get_logger,
)
from taskbind.core.settings import TaskbindSettings


class TestConfigureLogging:
    def teardown_method(self):
        clear_context()
        structlog.reset_defaults()

    def test_json_output_is_ecs_shaped(self, capsys):
        configure_logging(level="DEBUG", json_format=True, service="worker-test")
        get_logger("taskbind.test").info("task.resolved", target="core:MathOps")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "task.resolved"
        assert record["target"] == "core:MathOps"
        assert record["service.name"] == "worker-test"
        assert record["log.level"] == "info"
        assert "@timestamp" in record
        assert record["logger_name"] == "taskbind.test"

    def test_level_filters_debug(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("taskbind.test").debug("task.dispatch")
        assert "task.dispatch" not in capsys.readouterr().out

    def test_log_context_is_scoped(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        logger = get_logger("taskbind.test")

        with LogContext(task_id="t-1"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = (json.loads(line) for line in capsys.readouterr().out.strip().splitlines()[-2:])
        assert inside["task_id"] == "t-1"
        assert "task_id" not in outside

    def test_bind_context(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        bind_context(worker="w-1")
        get_logger().info("hello")
        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["worker"] == "w-1"

    def test_configure_from_settings(self, capsys):
        configure_from_settings(TaskbindSettings(log_level="warning", log_format="json"))
        logger = get_logger("taskbind.test")
        logger.info("quiet")
        logger.warning("loud")
        out = capsys.readouterr().out
        assert "quiet" not in out
        assert json.loads(out.strip().splitlines()[-1])["event"] == "loud"


class TestEnsureConfigured:
    def test_default_level_suppresses_debug(self, capsys):
        ensure_configured()
        logger = get_logger("taskbind.test")
        logger.debug("task.dispatch")
        logger.info("task.visible")

        out = capsys.readouterr().out
        assert "task.dispatch" not in out
        assert json.loads(out.strip().splitlines()[-1])["event"] == "task.visible"

    def test_log_level_from_env(self, monkeypatch, capsys):
        monkeypatch.setenv("TASKBIND_LOG_LEVEL", "debug")
        ensure_configured()
        get_logger("taskbind.test").debug("task.dispatch")
        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "task.dispatch"

    def test_application_configuration_is_kept(self, capsys):
        configure_logging(level="DEBUG", json_format=True, service="app")
        ensure_configured()
        get_logger("taskbind.test").debug("kept")
        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["service.name"] == "app"

    def test_module_logger_follows_later_configuration(self, capsys):
        logger = get_logger("taskbind.test")
        ensure_configured()
        logger.debug("hidden")
        configure_logging(level="DEBUG", json_format=True)
        logger.debug("shown")
        out = capsys.readouterr().out
        assert "hidden" not in out
        assert json.loads(out.strip().splitlines()[-1])["event"] == "shown"
