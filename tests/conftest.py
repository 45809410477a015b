"""
Pytest configuration for ampwatch tests

This module provides shared fixtures and configuration for all tests.
"""

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config and env lookups at a temp directory.

    Keeps a developer's ~/.ampwatch/config.yaml and AMPWATCH_* variables
    from leaking into tests.
    """
    from ampwatch import config

    for var in ("AMPWATCH_PREFIX", "AMPWATCH_REFRESH_INTERVAL", "AMPWATCH_TMUX_SOCKET"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "ampwatch" / "config.yaml")
    yield tmp_path / "ampwatch"
