"""
Root pytest configuration for the Django project.

pytest-django reads DJANGO_SETTINGS_MODULE from pyproject.toml and creates
the test database from migrations.
Shared fixtures live in finance/conftest.py and core/tests/conftest.py.
"""

import pytest


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full document lifecycle workflows)
    - test_services.py, test_engine.py, test_tasks.py, etc. → integration
    - test_models.py, test_resolver.py, test_validators.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_services.py",
        "test_engine.py",
        "test_reversal.py",
        "test_reconciliation.py",
        "test_document_service.py",
        "test_tasks.py",
        "test_admin.py",
        "test_optimistic_locking.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_resolver.py",
        "test_types.py",
        "test_validators.py",
        "test_managers.py",
        "test_soft_delete_mixin.py",
        "test_service_result.py",
        "test_state_transitions.py",
        "test_numbering.py",
        "test_locks.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
