"""Unit tests configuration file."""

import os

import pytest

from waygen.generator import parse

FIXTURE_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), "generator")


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


def fixture_path(name):
    return os.path.join(FIXTURE_DIR, name)


@pytest.fixture
def load_protocol():
    """Parse one of the XML fixtures next to the generator tests."""

    def load(name):
        with open(fixture_path(name), encoding="utf-8") as f:
            return parse(f.read())

    return load
