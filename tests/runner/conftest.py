"""Shared fixtures for runner tests."""

from __future__ import annotations

import pytest

from testweave.report.collect import CollectingReporter
from testweave.runner.models import Namespace


@pytest.fixture
def recorder() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def namespace() -> Namespace:
    return Namespace(name="sample")
