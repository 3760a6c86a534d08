"""
Shared pytest fixtures for the dumpwalk test suite.

Usage in tests:
    def test_something(renderer):
        assert renderer.render(42) == "Root (integer) 42"

    def test_config(config_manager):
        config = config_manager.load()
"""

import pytest

from dumpwalk.config import ConfigManager
from dumpwalk.core.classifier import ChildClassifier
from dumpwalk.core.walker import TreeRenderer


@pytest.fixture
def classifier():
    """Fresh ChildClassifier, so registrations never leak between tests."""
    return ChildClassifier()


@pytest.fixture
def renderer(classifier):
    """TreeRenderer with a two-space indent and its own classifier."""
    return TreeRenderer(indent_unit="  ", classifier=classifier)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """
    Point user config at a temp directory and clear DUMPWALK_* variables.

    Returns the project directory to use.
    """
    user_dir = tmp_path / "home" / ".dumpwalk"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_dir / "config.yaml")
    for key in ConfigManager.ENV_OVERRIDES:
        monkeypatch.delenv(key, raising=False)
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def config_manager(isolated_config):
    """ConfigManager over an empty project with isolated user config."""
    return ConfigManager(isolated_config)
