"""
Shared Test Fixtures for ConfKeeper
=====================================

This module provides reusable pytest fixtures used across the entire
test suite. Fixtures are organized by layer:

    1. Configuration fixtures
    2. Infrastructure fixtures (backend, adapter)
    3. Validation fixtures (MockValidator)
    4. Store fixtures (VersionedStore with a fixed clock)
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from confkeeper.core.config import ConfirmationConfig, ConfKeeperConfig
from confkeeper.core.enums import ValidatorKind
from confkeeper.core.models import ArtifactGroup
from confkeeper.infrastructure.adapter import BackendAdapter
from confkeeper.infrastructure.backend import InMemoryKeyValueBackend
from confkeeper.store.versioned_store import VersionedStore
from confkeeper.validation.mock import MockValidator
from confkeeper.versioning.retention import RetentionPolicy


# =============================================================================
# Helpers
# =============================================================================
class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def set(self, moment: datetime) -> None:
        self.moment = moment


NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def config():
    """ConfKeeper configuration with defaults."""
    return ConfKeeperConfig()


@pytest.fixture
def fast_confirmation():
    """Confirmation settings that give up quickly."""
    return ConfirmationConfig(poll_interval_seconds=0.01, timeout_seconds=0.2)


@pytest.fixture
def rules_group():
    """Artifact group for *.rules files, no external validator."""
    return ArtifactGroup(
        name="alertrules",
        current_collection="alertrules",
        history_collection="alertrules-versions",
        required_suffix=".rules",
        validator=ValidatorKind.NONE,
    )


# =============================================================================
# Infrastructure
# =============================================================================

@pytest.fixture
def backend():
    """Fresh read-your-writes InMemoryKeyValueBackend."""
    return InMemoryKeyValueBackend()


@pytest.fixture
def adapter(backend, fast_confirmation):
    """BackendAdapter over the in-memory backend."""
    return BackendAdapter(backend, fast_confirmation)


# =============================================================================
# Validation
# =============================================================================

@pytest.fixture
def mock_validator():
    """MockValidator that accepts everything unless told otherwise."""
    return MockValidator()


# =============================================================================
# Store
# =============================================================================

@pytest.fixture
def clock():
    """Clock fixed at 2024-03-01T12:00:00Z."""
    return FixedClock(NOW)


@pytest.fixture
def store(adapter, rules_group, mock_validator, clock):
    """VersionedStore for the rules group with default retention."""
    return VersionedStore(
        adapter,
        rules_group,
        validator=mock_validator,
        retention=RetentionPolicy(max_backup_files=10, max_backup_hours=48),
        clock=clock,
    )
