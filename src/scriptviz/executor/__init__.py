"""
Script execution for the visualization runner.

The interpreter is not chosen here: the policy resolver decides it and hands
over an :class:`~scriptviz.policy.ExecutionPlan`.  :class:`ScriptRunner`
only spawns that interpreter against the staged script and the expected
artifact path, waits for it (bounded by a timeout) and classifies the
outcome as an :class:`ExecutionResult`.
"""

from .base import ExecutionResult, ExecutionStatus, FailureKind, ProcessOutcome, run_subprocess
from .runner import ScriptRunner

__all__ = [
    "ExecutionResult",
    "ExecutionStatus",
    "FailureKind",
    "ProcessOutcome",
    "ScriptRunner",
    "run_subprocess",
]
