"""
Shared pytest fixtures for Kubernetes Actions tests.

This module provides common fixtures including:
- KubectlMocker: Fake process executor with pattern-matched kubectl responses
- Orchestrator and FastAPI test client wired to the mocker
"""

import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple, Union

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kubeactions.modules.commands import CommandSpec
from kubeactions.modules.executor import ExecutionResult
from kubeactions.modules.orchestrator import MutationOrchestrator


# =============================================================================
# Kubectl Mocking Infrastructure
# =============================================================================

@dataclass
class KubectlResponse:
    """Represents a mocked kubectl command response."""
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    def to_execution_result(self) -> ExecutionResult:
        """Convert to the executor's result type."""
        return ExecutionResult(
            exit_code=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr,
            duration_ms=1,
        )


@dataclass
class KubectlCall:
    """Record of a kubectl call made during testing."""
    spec: CommandSpec
    full_command_str: str
    timeout: Optional[float] = None
    matched_pattern: Optional[str] = None
    response: Optional[KubectlResponse] = None


class KubectlMocker:
    """
    Stand-in for ProcessExecutor with pattern-matched responses.

    Patterns are matched against the space-joined kubectl arguments. A
    registered exception is raised instead of returning a result.

    Usage:
        async def test_create(kubectl_mocker, orchestrator):
            kubectl_mocker.register("create deployment", KubectlResponse(
                stdout="deployment.apps/web created"
            ))
            outcome = await orchestrator.execute(request)
            assert kubectl_mocker.was_called_with("label deployment web")
    """

    def __init__(self):
        self._responses: List[Tuple[Union[str, Pattern], Union[KubectlResponse, Exception], int]] = []
        self._call_history: List[KubectlCall] = []
        self._default_response = KubectlResponse(
            stderr="Error: mock not configured for this command",
            returncode=1
        )

    def register(
        self,
        pattern: Union[str, Pattern],
        response: Union[KubectlResponse, Exception],
        priority: int = 0
    ) -> "KubectlMocker":
        """
        Register a response for commands matching the pattern.

        Args:
            pattern: String (substring match) or regex pattern
            response: KubectlResponse to return, or exception to raise
            priority: Higher priority patterns are checked first

        Returns:
            self for chaining
        """
        self._responses.append((pattern, response, priority))
        self._responses.sort(key=lambda x: x[2], reverse=True)
        return self

    def set_default_response(self, response: KubectlResponse) -> "KubectlMocker":
        """Set the default response for unmatched commands."""
        self._default_response = response
        return self

    async def run(self, spec: CommandSpec, timeout: Optional[float] = None) -> ExecutionResult:
        """Fake ProcessExecutor.run."""
        args_str = " ".join(spec.arguments)
        matched_pattern = None
        response = self._default_response

        for pattern, resp, _ in self._responses:
            if isinstance(pattern, str):
                if pattern in args_str:
                    matched_pattern = pattern
                    response = resp
                    break
            elif pattern.search(args_str):
                matched_pattern = pattern.pattern
                response = resp
                break

        self._call_history.append(KubectlCall(
            spec=spec,
            full_command_str=" ".join(spec.argv),
            timeout=timeout,
            matched_pattern=matched_pattern,
            response=response if isinstance(response, KubectlResponse) else None,
        ))

        if isinstance(response, Exception):
            raise response
        return response.to_execution_result()

    @property
    def calls(self) -> List[KubectlCall]:
        """Get all kubectl calls made during the test."""
        return self._call_history

    @property
    def call_count(self) -> int:
        """Get the number of kubectl calls made."""
        return len(self._call_history)

    def was_called_with(self, pattern: str) -> bool:
        """Check if any call contained the given pattern."""
        return any(pattern in call.full_command_str for call in self._call_history)

    def get_calls_matching(self, pattern: str) -> List[KubectlCall]:
        """Get all calls containing the given pattern."""
        return [c for c in self._call_history if pattern in c.full_command_str]

    def reset(self):
        """Clear call history (but keep registered responses)."""
        self._call_history = []


@pytest.fixture
def kubectl_mocker():
    """Fake executor that fails any unregistered command with exit code 1."""
    return KubectlMocker()


@pytest.fixture
def orchestrator(kubectl_mocker):
    """Orchestrator running against the mocker."""
    return MutationOrchestrator(kubectl_mocker, binary="kubectl", timeout=5)


@pytest.fixture
def client(orchestrator, tmp_path):
    """
    FastAPI TestClient with the orchestrator replaced by the mocked one.

    Template actions resolve manifest paths against ``tmp_path``.
    """
    from fastapi.testclient import TestClient

    from kubeactions.main import app, config, get_orchestrator

    original_workspace = config.get("workspace_path")
    config.set("workspace_path", str(tmp_path))
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        config.set("workspace_path", original_workspace)


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "kubectl_mock: Tests using the mocked kubectl executor"
    )
    config.addinivalue_line(
        "markers", "subprocess: Tests that spawn real child processes"
    )

