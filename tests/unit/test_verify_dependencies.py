"""
Unit tests for the dependency verification script.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "scripts"))
from verify_dependencies import DEPENDENCIES, main, verify_imports  # noqa: E402


def test_dependencies_cover_runtime_stack():
    """Verify that the core runtime libraries are checked."""
    modules = [module_name for module_name, _ in DEPENDENCIES]

    for required in ("pydantic", "structlog", "tenacity", "jsonschema", "jinja2"):
        assert required in modules, f"{required} should be verified"


def test_dependencies_list_structure():
    """Verify that each dependency entry has the correct structure."""
    for dep in DEPENDENCIES:
        assert len(dep) == 2, f"Dependency {dep} should have exactly 2 elements"
        module_name, display_name = dep
        assert isinstance(module_name, str)
        assert isinstance(display_name, str)


@patch("verify_dependencies.import_module")
@patch("builtins.print")
def test_verify_imports_all_succeed(mock_print, mock_import):
    """Test that verify_imports reports no failures when every import works."""
    mock_import.return_value = MagicMock()

    failed = verify_imports()

    assert failed == []
    ok_calls = [call for call in mock_print.call_args_list if "[OK]" in str(call)]
    assert len(ok_calls) == len(DEPENDENCIES), "Should print OK for each dependency"


@patch("verify_dependencies.import_module")
@patch("builtins.print")
def test_verify_imports_collects_failures(mock_print, mock_import):
    """Test that failed imports are returned by display name."""

    def side_effect(module_name):
        if module_name == "jsonlines":
            raise ImportError(f"No module named '{module_name}'")
        return MagicMock()

    mock_import.side_effect = side_effect

    assert verify_imports() == ["Jsonlines"]


@patch("verify_dependencies.import_module")
@patch("builtins.print")
def test_main_exit_codes(mock_print, mock_import):
    """Test that main exits 0 on success and 1 on any failure."""
    mock_import.return_value = MagicMock()
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 0

    mock_import.side_effect = ImportError("missing")
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 1
    error_calls = [call for call in mock_print.call_args_list if "[ERROR]" in str(call)]
    assert len(error_calls) == 1
