"""
Tests for the process executor.

These spawn the running Python interpreter as a stand-in for kubectl, so
they exercise real process creation, stream capture and killing.
"""

import asyncio
import sys

import pytest

from kubeactions.modules.commands import CommandSpec
from kubeactions.modules.errors import CommandTimeoutError, SpawnError
from kubeactions.modules.executor import ProcessExecutor

pytestmark = pytest.mark.subprocess


def python_spec(code: str, stdin=None, cwd=None) -> CommandSpec:
    return CommandSpec(binary=sys.executable, arguments=("-c", code), stdin=stdin, cwd=cwd)


@pytest.mark.asyncio
async def test_captures_stdout_and_exit_code():
    executor = ProcessExecutor(default_timeout=10)
    result = await executor.run(python_spec("print('deployment.apps/web created')"))

    assert result.exit_code == 0
    assert result.success
    assert result.stdout.strip() == "deployment.apps/web created"
    assert result.stderr == ""
    assert result.duration_ms >= 0


@pytest.mark.asyncio
async def test_non_zero_exit_is_returned_not_raised():
    executor = ProcessExecutor(default_timeout=10)
    code = "import sys; sys.stderr.write('Error from server (NotFound)'); sys.exit(1)"
    result = await executor.run(python_spec(code))

    assert result.exit_code == 1
    assert not result.success
    assert "NotFound" in result.stderr


@pytest.mark.asyncio
async def test_arguments_are_not_shell_interpreted():
    executor = ProcessExecutor(default_timeout=10)
    spec = CommandSpec(
        binary=sys.executable,
        arguments=("-c", "import sys; print(sys.argv[1])", "$(echo hi); rm -rf /"),
    )
    result = await executor.run(spec)
    assert result.stdout.strip() == "$(echo hi); rm -rf /"


@pytest.mark.asyncio
async def test_stdin_is_piped():
    executor = ProcessExecutor(default_timeout=10)
    result = await executor.run(
        python_spec("import sys; print(sys.stdin.read().upper())", stdin="kind: pod")
    )
    assert result.stdout.strip() == "KIND: POD"


@pytest.mark.asyncio
async def test_cwd_is_applied(tmp_path):
    executor = ProcessExecutor(default_timeout=10)
    result = await executor.run(python_spec("import os; print(os.getcwd())", cwd=tmp_path))
    assert result.stdout.strip() == str(tmp_path.resolve())


@pytest.mark.asyncio
async def test_missing_binary_raises_spawn_error():
    executor = ProcessExecutor(default_timeout=10)
    spec = CommandSpec(binary="/nonexistent/kubectl-does-not-exist", arguments=("version",))
    with pytest.raises(SpawnError):
        await executor.run(spec)


@pytest.mark.asyncio
async def test_timeout_kills_process():
    executor = ProcessExecutor(default_timeout=10)
    with pytest.raises(CommandTimeoutError) as exc_info:
        await executor.run(python_spec("import time; time.sleep(30)"), timeout=0.5)
    assert exc_info.value.timeout == 0.5


@pytest.mark.asyncio
async def test_default_timeout_used():
    executor = ProcessExecutor(default_timeout=0.5)
    with pytest.raises(CommandTimeoutError):
        await executor.run(python_spec("import time; time.sleep(30)"))


@pytest.mark.asyncio
async def test_cancellation_propagates():
    executor = ProcessExecutor(default_timeout=30)
    task = asyncio.ensure_future(executor.run(python_spec("import time; time.sleep(30)")))
    await asyncio.sleep(0.5)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await asyncio.wait_for(task, timeout=5)


@pytest.mark.asyncio
async def test_undecodable_output_is_replaced():
    executor = ProcessExecutor(default_timeout=10)
    result = await executor.run(
        python_spec("import sys; sys.stdout.buffer.write(b'ok\\xff')")
    )
    assert result.stdout.startswith("ok")
    assert "\ufffd" in result.stdout
