"""Tests for settings, logging setup and error types."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import orjson
import pytest
from pydantic import ValidationError

from toolfold.foundation.config import LoggingSettings, ToolfoldSettings, clear_settings_cache, get_settings
from toolfold.foundation.errors import BuildError, ErrorCode, ToolCallError, ToolError
from toolfold.foundation.logging import ROOT, configure_logging, get_logger


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger(ROOT)
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# ═════════════════════════════════════════════════════════════════════════════
# Settings
# ═════════════════════════════════════════════════════════════════════════════


def test_defaults() -> None:
    settings = ToolfoldSettings()
    assert settings.exposition == "flat"
    assert settings.action_separator == "_"
    assert settings.discriminator == "action"
    assert settings.description_mode == "plain"
    assert settings.debug is False
    assert settings.logging.level == "INFO" and settings.logging.format == "text"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOOLFOLD_EXPOSITION", "Grouped")
    monkeypatch.setenv("TOOLFOLD_DEBUG", "true")
    monkeypatch.setenv("TOOLFOLD_LOG_LEVEL", "debug")
    monkeypatch.setenv("TOOLFOLD_LOG_FORMAT", "json")

    settings = ToolfoldSettings()

    assert settings.exposition == "grouped"
    assert settings.debug is True
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "json"


def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOOLFOLD_EXPOSITION", "nested")
    with pytest.raises(ValidationError):
        ToolfoldSettings()
    with pytest.raises(ValidationError):
        ToolfoldSettings(action_separator="")


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    assert get_settings() is first
    monkeypatch.setenv("TOOLFOLD_DISCRIMINATOR", "op")
    assert get_settings().discriminator == "action"
    clear_settings_cache()
    assert get_settings().discriminator == "op"


# ═════════════════════════════════════════════════════════════════════════════
# Logging
# ═════════════════════════════════════════════════════════════════════════════


def test_get_logger_namespace() -> None:
    assert get_logger("registry").name == "toolfold.registry"


def test_json_logging(restore_logging: None) -> None:
    buf = io.StringIO()
    configure_logging(level="debug", format="json", output=buf)

    get_logger("test").info("registered tool", extra={"tool": "projects"})

    record = orjson.loads(buf.getvalue().splitlines()[-1])
    assert record["event"] == "registered tool"
    assert record["level"] == "info"
    assert record["logger"] == "toolfold.test"
    assert record["tool"] == "projects"
    assert "timestamp" in record


def test_text_logging_without_timestamps(restore_logging: None) -> None:
    buf = io.StringIO()
    configure_logging(format="text", output=buf, settings=LoggingSettings(include_timestamps=False))

    get_logger("test").warning("unknown tool", extra={"tool": "nope"})

    assert buf.getvalue().strip() == "[warning] toolfold.test: unknown tool tool=nope"


def test_level_filters_records(restore_logging: None) -> None:
    buf = io.StringIO()
    configure_logging(level="WARNING", format="text", output=buf)
    get_logger("test").info("hidden")
    assert buf.getvalue() == ""


def test_debug_setting_lowers_default_level(restore_logging: None, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TOOLFOLD_DEBUG", "1")
    clear_settings_cache()
    buf = io.StringIO()

    root = configure_logging(format="text", output=buf, settings=LoggingSettings(include_timestamps=False))
    get_logger("test").debug("compiled")

    assert root.level == logging.DEBUG
    assert buf.getvalue().strip() == "[debug] toolfold.test: compiled"
    assert configure_logging(level="ERROR", format="text", output=io.StringIO()).level == logging.ERROR


def test_reconfigure_replaces_handler(restore_logging: None) -> None:
    configure_logging(format="text", output=io.StringIO())
    root = configure_logging(format="json", output=io.StringIO())
    installed = [h for h in root.handlers if getattr(h, "_toolfold", False)]
    assert len(installed) == 1


def test_unknown_log_format(restore_logging: None) -> None:
    with pytest.raises(ValueError, match="Unknown log format"):
        configure_logging(format="xml")


# ═════════════════════════════════════════════════════════════════════════════
# Errors
# ═════════════════════════════════════════════════════════════════════════════


def test_tool_error_render_escapes() -> None:
    err = ToolError.create(ErrorCode.NOT_FOUND, "No <project>", details={"id": 'p"9'})
    rendered = err.render()
    assert rendered.startswith('<tool_error code="NOT_FOUND" severity="error">')
    assert "<message>No &lt;project&gt;</message>" in rendered
    assert '<detail key="id">p"9</detail>' in rendered
    assert str(err) == rendered


def test_tool_error_requires_message() -> None:
    with pytest.raises(ValidationError):
        ToolError.create(ErrorCode.INTERNAL_ERROR, "   ")


def test_warning_is_not_error() -> None:
    assert ToolError.create("Deprecated", "old", severity="warning").is_error is False
    assert ToolError.create("Boom", "bad", severity="critical").is_error is True


def test_build_error_is_value_error() -> None:
    err = BuildError("bad builder", tool_name="projects")
    assert isinstance(err, ValueError)
    assert err.tool_name == "projects"


def test_tool_call_error_keeps_text() -> None:
    err = ToolCallError("<tool_error>…</tool_error>")
    assert err.text == str(err) == "<tool_error>…</tool_error>"
