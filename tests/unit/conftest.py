"""
Unit test fixtures for Ampwatch.

Builds fleets entirely from in-memory mocks: no tmux server, no files,
no gh or amp processes.
"""

import pytest

from ampwatch.discovery import FleetScanner
from ampwatch.mocks import MockFileSystem, MockSubprocess, MockTmux

from fixtures import PREFIX


@pytest.fixture
def tmux():
    return MockTmux()


@pytest.fixture
def fs():
    return MockFileSystem()


@pytest.fixture
def runner():
    return MockSubprocess()


@pytest.fixture
def scanner(tmux, fs, runner):
    return FleetScanner(prefix=PREFIX, tmux=tmux, fs=fs, runner=runner, env={})
