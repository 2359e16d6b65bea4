"""
Orchestrator Module - Black Box Interface

Purpose: Sequence multi-step cluster mutations and classify their outcome
Interface: MutationOrchestrator.execute(), run(), list_resources()
Hidden: Step planning, abort-on-first-failure, partial-success detection
"""

from .orchestrator import MutationOrchestrator, OrchestrationOutcome, OutcomeStatus

__all__ = ["MutationOrchestrator", "OrchestrationOutcome", "OutcomeStatus"]
