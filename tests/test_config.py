"""Tests for settings and logging setup."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from py_voronoi3d.config import Settings, resolve, settings
from py_voronoi3d.core.diagram import VoronoiDiagram
from py_voronoi3d.utils.logging_config import configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        """Test default values."""
        s = Settings()
        assert s.epsilon == pytest.approx(1e-6)
        assert s.out_of_bounds_policy == "reject"
        assert s.max_workers == 1

    def test_environment_override(self, monkeypatch):
        """Test VORONOI3D_* variables."""
        monkeypatch.setenv("VORONOI3D_EPSILON", "1e-4")
        monkeypatch.setenv("VORONOI3D_OUT_OF_BOUNDS_POLICY", "skip")
        monkeypatch.setenv("VORONOI3D_MAX_WORKERS", "3")
        s = Settings()
        assert s.epsilon == pytest.approx(1e-4)
        assert s.out_of_bounds_policy == "skip"
        assert s.max_workers == 3

    @pytest.mark.parametrize("name,value", [
        ("VORONOI3D_EPSILON", "0"),
        ("VORONOI3D_OUT_OF_BOUNDS_POLICY", "clamp"),
        ("VORONOI3D_MAX_WORKERS", "0"),
    ])
    def test_invalid_values(self, monkeypatch, name, value):
        """Test validation of bad values."""
        monkeypatch.setenv(name, value)
        with pytest.raises(ValidationError):
            Settings()

    def test_resolve(self):
        """Test fallback to the settings singleton."""
        assert resolve(None, "epsilon") == settings.epsilon
        assert resolve(0.5, "epsilon") == 0.5

    def test_diagram_uses_settings(self, monkeypatch):
        """Test that the diagram picks up the configured policy."""
        monkeypatch.setattr(settings, "out_of_bounds_policy", "skip")
        diagram = VoronoiDiagram([[0.5, 0.5, 0.5], [3, 3, 3]], [0, 0, 0], [1, 1, 1])
        assert len(diagram.regions) == 1


class TestLogging:
    """Test structlog configuration."""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root = logging.getLogger()
        level = root.level
        handlers = root.handlers[:]
        yield
        structlog.reset_defaults()
        root.handlers = handlers
        root.setLevel(level)

    def test_configure_level(self):
        """Test that the stdlib root level follows the argument."""
        configure_logging("debug", "console")
        assert logging.getLogger().level == logging.DEBUG
        assert structlog.is_configured()

    def test_configure_json(self, capsys):
        """Test that events are rendered as JSON."""
        configure_logging("INFO", "json")
        structlog.get_logger("test").info("hello", answer=42)
        out = capsys.readouterr().out
        assert '"event": "hello"' in out
        assert '"answer": 42' in out
