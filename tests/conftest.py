# tests/conftest.py
import asyncio
from typing import Any

import httpx
import pytest

from interview_sim.core.question_client import QuestionServiceClient, RemoteUnavailable
from interview_sim.models.interview import InterviewConfig, InterviewStyle

from tests.fake_service import FakeQuestionService


class StubQuestionClient:
    """
    In-memory stand-in for QuestionServiceClient.

    ``question_error`` / ``analysis_error`` / ``analytics_error`` make the
    matching operation raise. ``question_gate`` / ``analysis_gate`` hold the
    call until the event is set.
    """

    def __init__(self):
        self.question_error: Exception | None = None
        self.analysis_error: Exception | None = None
        self.analytics_error: Exception | None = None
        self.followup_error: Exception | None = None
        self.question_gate: asyncio.Event | None = None
        self.analysis_gate: asyncio.Event | None = None
        self.healthy = True

        self.question_calls: list[int] = []
        self.analysis_calls: list[str] = []
        self.analytics_calls: list[list[Any]] = []

    async def generate_question(self, config, previous_questions=(), previous_responses=(), question_number=1):
        self.question_calls.append(question_number)
        if self.question_gate is not None:
            await self.question_gate.wait()
        if self.question_error is not None:
            raise self.question_error
        return f"Remote question {question_number}"

    async def generate_followup(self, question, response, config):
        if self.followup_error is not None:
            raise self.followup_error
        return f"Follow-up on: {response}"

    async def analyze_response(self, question, answer, config):
        self.analysis_calls.append(answer)
        if self.analysis_gate is not None:
            await self.analysis_gate.wait()
        if self.analysis_error is not None:
            raise self.analysis_error
        return {"answer_length": len(answer)}

    async def generate_analytics(self, responses, config):
        self.analytics_calls.append(list(responses))
        if self.analytics_error is not None:
            raise self.analytics_error
        return {"total_responses": len(responses)}

    async def check_health(self):
        return self.healthy


@pytest.fixture
def config():
    """Three-question technical interview."""
    return InterviewConfig(
        topic="python",
        style=InterviewStyle.TECHNICAL,
        duration=15,
        max_questions=3,
    )


@pytest.fixture
def stub_client():
    return StubQuestionClient()


@pytest.fixture
def failing_client():
    """Stub whose every remote operation fails."""
    client = StubQuestionClient()
    client.question_error = RemoteUnavailable("connection refused")
    client.analysis_error = RemoteUnavailable("connection refused")
    client.followup_error = RemoteUnavailable("connection refused")
    client.healthy = False
    return client


@pytest.fixture
def fake_service():
    return FakeQuestionService()


@pytest.fixture
async def service_client(fake_service):
    """QuestionServiceClient wired to the fake service in-process."""
    http_client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=fake_service.app),
        base_url="http://testserver/api",
    )
    client = QuestionServiceClient(
        base_url="http://testserver/api",
        timeout=5.0,
        http_client=http_client,
    )
    yield client
    await http_client.aclose()
