import sys
from pathlib import Path

import pytest


# Ensure the project root and this directory are importable without an install.
ROOT_DIR = Path(__file__).resolve().parents[1]
TESTS_DIR = Path(__file__).resolve().parent
for path in (ROOT_DIR, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from fake_marathon import FakeMarathon  # noqa: E402
from marathon_adapter.applications import ApplicationManager  # noqa: E402


@pytest.fixture
def marathon() -> FakeMarathon:
    return FakeMarathon()


@pytest.fixture
def manager(marathon: FakeMarathon) -> ApplicationManager:
    return ApplicationManager(marathon)
