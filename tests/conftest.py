"""Shared fixtures for all tests."""

import os
import pytest

from pin_guard.reporter.base import Reporter


FIXTURES_ROOT = os.path.join(os.path.dirname(__file__), "fixtures")
WORKFLOWS_DIR = os.path.join(FIXTURES_ROOT, ".github/workflows")
ACTIONS_DIR = os.path.join(FIXTURES_ROOT, ".github/actions")

COMMIT_SHA = "b4ffde65f46336ab88eb53be808477a3936bae11"
IMAGE_DIGEST = "c5b1261d6d3e43071626931fc004f70149baeba2c8ec672bd4f27761f8e1ad6b"


class RecordingReporter(Reporter):
    """Keeps every call in order so tests can assert on it."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def _emit(self, severity, message, file, line):
        self.calls.append((severity.value, message))

    def _start_group(self, name):
        self.calls.append(("start_group", name))

    def _end_group(self):
        self.calls.append(("end_group", None))

    def messages(self, level):
        return [message for kind, message in self.calls if kind == level]


@pytest.fixture(autouse=True)
def _clean_action_env(monkeypatch):
    """Keep a real Actions environment from leaking into the tests."""
    for name in ("INPUT_ALLOWLIST", "INPUT_DRY_RUN", "GITHUB_ACTIONS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def fixtures_root():
    """Path to a repository checkout with workflows and actions."""
    return FIXTURES_ROOT


@pytest.fixture
def make_repo(tmp_path):
    """Write {relative path: YAML text} into tmp_path and return its path."""
    def _make(files):
        for rel_path, text in files.items():
            target = tmp_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text)
        return tmp_path
    return _make
