"""
Executor Module - Black Box Interface

Purpose: Run kubectl as a child process
Interface: ProcessExecutor.run(spec, timeout) -> ExecutionResult
Hidden: asyncio subprocess handling, stream decoding, kill-on-timeout/cancel

Can be replaced with a different execution mechanism (direct K8s API, remote agent).
"""

from .process import ExecutionResult, ProcessExecutor

__all__ = ["ExecutionResult", "ProcessExecutor"]
