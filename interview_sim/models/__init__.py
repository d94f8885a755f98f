"""
Data models and schemas for interview-sim

Contains Pydantic models for:
- Interview configuration
- Questions and responses
- Session state and progress
- Remote service payloads
"""

from interview_sim.models.interview import (
    AnalyticsData,
    ExperienceLevel,
    InterviewConfig,
    InterviewResponse,
    InterviewStyle,
    Progress,
    Question,
    QuestionCategory,
    QuestionSource,
    SessionMode,
    SessionPhase,
    SessionState,
)

__all__ = [
    # Configuration
    "InterviewConfig",
    "InterviewStyle",
    "ExperienceLevel",
    "QuestionCategory",
    # Session
    "Question",
    "QuestionSource",
    "InterviewResponse",
    "SessionState",
    "SessionMode",
    "SessionPhase",
    "Progress",
    "AnalyticsData",
]
