"""
Import validation tests.

These tests ensure all modules can be imported successfully, catching
issues like missing dependencies or circular imports BEFORE deployment.

Run with: pytest tests/unit/test_imports.py -v
"""

import importlib
import sys
from pathlib import Path

import pytest


# Add src to path to simulate Lambda environment
SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


class TestHandlerImports:
    """Verify all handler modules can be imported without errors."""

    @pytest.mark.parametrize("module_name, entrypoint", [
        ("handlers.main", "lambda_handler"),
        ("handlers.health_check", "lambda_handler"),
        ("handlers.tickets", "book_handler"),
    ])
    def test_handler_import(self, module_name: str, entrypoint: str):
        """Each handler module should import without creating AWS clients."""
        try:
            module = importlib.import_module(module_name)
            assert hasattr(module, entrypoint), f"{module_name} missing {entrypoint}"
        except ImportError as e:
            pytest.fail(f"Failed to import {module_name}: {e}")


@pytest.mark.parametrize("module_name", [
    "services.identity_service",
    "services.ticket_issuer",
    "services.ticket_verifier",
    "services.ticket_query_service",
    "repositories.dynamodb_repo",
    "repositories.event_repo",
    "repositories.ticket_repo",
    "repositories.user_repo",
    "models.event",
    "models.response",
    "models.ticket",
    "utils.logging_config",
    "utils.cache_service",
    "utils.error_handling",
    "utils.validators",
    "utils.settings",
    "utils.time_policy",
    "utils.codes",
    "utils.qr_code",
])
def test_module_import(module_name: str):
    try:
        importlib.import_module(module_name)
    except ImportError as e:
        pytest.fail(f"Failed to import {module_name}: {e}")


@pytest.mark.parametrize("package", ["handlers", "services", "repositories", "models", "utils"])
def test_no_src_prefix(package: str):
    """Modules must not use 'from src.' imports (breaks in Lambda)."""
    for py_file in (SRC_PATH / package).glob("*.py"):
        content = py_file.read_text()
        assert "from src." not in content, f"{py_file.name} contains 'from src.' import"
        assert "import src." not in content, f"{py_file.name} contains 'import src.' import"
