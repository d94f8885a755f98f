"""
Core modules for interview-sim

Contains:
- Boundary Codec: key-naming conversion for remote payloads
- Question Client: remote question service wrapper
- Fallback Question Bank: offline question source
- Interview Orchestrator: State machine for the session lifecycle
- Progress: session progress projection
"""

from interview_sim.core.boundary_codec import to_local_format, to_wire_format
from interview_sim.core.fallback_bank import FallbackQuestionBank
from interview_sim.core.interview_orchestrator import InterviewOrchestrator, InvalidStateError
from interview_sim.core.progress import compute_progress
from interview_sim.core.question_client import (
    QuestionServiceClient,
    RemoteError,
    RemoteProtocolError,
    RemoteTimeout,
    RemoteUnavailable,
)

__all__ = [
    "to_wire_format",
    "to_local_format",
    "FallbackQuestionBank",
    "InterviewOrchestrator",
    "InvalidStateError",
    "compute_progress",
    "QuestionServiceClient",
    "RemoteError",
    "RemoteUnavailable",
    "RemoteTimeout",
    "RemoteProtocolError",
]
