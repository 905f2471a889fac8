#!/usr/bin/env python3
"""
Dependency Verification Script
Checks that the coaching runtime stack and test tooling import cleanly.
"""

import sys
from importlib import import_module

# Runtime stack first, then test tooling
DEPENDENCIES = [
    ("pydantic", "Pydantic"),
    ("structlog", "Structlog"),
    ("tenacity", "Tenacity"),
    ("jsonschema", "JSON Schema"),
    ("jsonlines", "Jsonlines"),
    ("jinja2", "Jinja2"),
    ("dotenv", "python-dotenv"),
    ("rich", "Rich"),
    ("worklife_coach", "worklife-coach"),
    ("pytest", "Pytest"),
    ("pytest_asyncio", "pytest-asyncio"),
    ("pytest_mock", "pytest-mock"),
]


def verify_imports() -> list[str]:
    """Import every dependency and return the display names that failed."""
    failed = []

    print("Verifying dependencies...\n")

    for module_name, display_name in DEPENDENCIES:
        try:
            import_module(module_name)
            print(f"[OK] {display_name}")
        except ImportError as e:
            print(f"[FAILED] {display_name}: {e}")
            failed.append(display_name)

    return failed


def main() -> None:
    failed = verify_imports()
    print(f"\n{'=' * 60}")

    if failed:
        print(f"[ERROR] {len(failed)} dependencies failed:")
        for name in failed:
            print(f"   - {name}")
        sys.exit(1)

    print("[SUCCESS] All dependencies verified successfully!")
    sys.exit(0)


if __name__ == "__main__":
    main()
