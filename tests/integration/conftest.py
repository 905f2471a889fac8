"""
Integration Test Configuration

Provides fixtures and configuration for integration tests.
When running in CI environment (CI=true), slow tests are automatically skipped.
"""

import os

import pytest

from worklife_coach.models.config import CoachParams, RetryConfig, SessionConfig
from worklife_coach.orchestrator import CoachingOrchestrator
from worklife_coach.persistence.file_store import FileDataStore


@pytest.fixture
def is_ci_environment() -> bool:
    """
    Detect if tests are running in CI environment.

    Returns:
        True if CI environment variable is set to 'true'
    """
    return os.getenv("CI", "").lower() == "true"


@pytest.fixture(autouse=True)
def skip_slow_tests_in_ci(request, is_ci_environment):
    """
    Automatically skip slow integration tests when running in CI.

    Slow tests (marked with @pytest.mark.slow) wait on real session timers.

    Args:
        request: pytest request fixture
        is_ci_environment: Fixture indicating CI environment
    """
    if is_ci_environment and request.node.get_closest_marker("slow"):
        pytest.skip("Skipping slow test in CI environment")


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "coach-data"


@pytest.fixture
def make_orchestrator(data_dir):
    """
    Build orchestrators over a shared file store directory.

    Every orchestrator created through the factory is shut down on teardown,
    which cancels its session timers.
    """
    created: list[CoachingOrchestrator] = []

    def factory(timeout_seconds: float = 60.0) -> CoachingOrchestrator:
        params = CoachParams(
            session=SessionConfig(
                timeout_seconds=timeout_seconds, warning_seconds=timeout_seconds * 0.8
            ),
            retry=RetryConfig(max_attempts=2, initial_delay=0.0),
        )
        orchestrator = CoachingOrchestrator(FileDataStore(data_dir), params=params)
        created.append(orchestrator)
        return orchestrator

    yield factory

    for orchestrator in created:
        orchestrator.session_manager.shutdown()
