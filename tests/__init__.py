"""
ConfKeeper Test Suite
=====================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/           → Tests for confkeeper.core (config, models, exceptions)
    ├── test_versioning/     → Tests for confkeeper.versioning (keys, retention)
    ├── test_infrastructure/ → Tests for confkeeper.infrastructure (backends, adapter)
    ├── test_validation/     → Tests for confkeeper.validation
    ├── test_store/          → Tests for confkeeper.store (VersionedStore)
    ├── test_orchestration/  → Tests for confkeeper.orchestration (retry)
    ├── test_integrations/   → Tests for confkeeper.integrations (endpoint polling)
    ├── test_facade.py       → Tests for the ConfKeeper facade
    └── conftest.py          → Shared pytest fixtures

Running Tests:
    pytest                          # Run all tests
    pytest tests/test_store/        # Run only store tests
    pytest --cov=confkeeper         # Run with coverage report
"""
