"""
Response payloads of the remote question service.

Bodies are validated here after the boundary codec has converted them to the
local format, so nothing untyped leaves the client.
"""

from typing import Any

from pydantic import Field

from interview_sim.models.interview import LocalModel


class GeneratedQuestionPayload(LocalModel):
    """Body of POST /generate-question."""

    question: str = Field(..., min_length=1)


class FollowUpPayload(LocalModel):
    """Body of POST /generate-followup."""

    follow_up: str = Field(..., min_length=1)


class AnalysisPayload(LocalModel):
    """Body of POST /analyze-response. The analysis itself is opaque."""

    analysis: Any


class AnalyticsPayload(LocalModel):
    """Body of POST /generate-analytics."""

    analytics: dict[str, Any]


class HealthPayload(LocalModel):
    """Body of GET /health."""

    status: Any
