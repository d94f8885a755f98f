"""
Remote Question Client for interview-sim

Wraps the remote question-generation service:
- Question generation
- Follow-up generation
- Response analysis
- End-of-session analytics
- Health checks

Request bodies are built in the local format and mapped to the wire format
by the boundary codec; response bodies are mapped back and validated before
anything is returned to the caller.
"""

import asyncio
import logging
from typing import Any, Sequence, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from interview_sim.config.settings import Settings
from interview_sim.core.boundary_codec import to_local_format, to_wire_format
from interview_sim.models.interview import (
    AnalyticsData,
    InterviewConfig,
    InterviewResponse,
)
from interview_sim.models.remote import (
    AnalysisPayload,
    AnalyticsPayload,
    FollowUpPayload,
    GeneratedQuestionPayload,
    HealthPayload,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120.0

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class RemoteError(Exception):
    """Base class for failures talking to the question service."""
    pass


class RemoteUnavailable(RemoteError):
    """Raised on transport errors or a server-side failure status."""
    pass


class RemoteTimeout(RemoteError):
    """Raised when a call exceeds its time ceiling."""
    pass


class RemoteProtocolError(RemoteError):
    """Raised when the service answers with an unexpected shape."""
    pass


class QuestionServiceClient:
    """
    Client for the remote question-generation service.

    One instance is constructed explicitly and handed to the orchestrator.
    All operations except ``check_health`` raise a ``RemoteError`` subclass
    on failure.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the question service (e.g. ``.../api``)
            timeout: Ceiling for each remote call, in seconds
            http_client: Pre-built client (custom transport, tests); it is
                not closed by ``close()``
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "QuestionServiceClient":
        """Build a client from application settings."""
        return cls(
            base_url=settings.question_service_url,
            timeout=settings.request_timeout_seconds,
        )

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "QuestionServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send one request and return the body in local format.

        Raises:
            RemoteTimeout: The call exceeded ``self.timeout``
            RemoteUnavailable: Transport error or 5xx status
            RemoteProtocolError: 4xx status or a body that is not a JSON object
        """
        body = to_wire_format(payload) if payload is not None else None

        try:
            response = await asyncio.wait_for(
                self.client.request(method, path, json=body),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error(f"{method} {path} timed out after {self.timeout}s")
            raise RemoteTimeout(f"{method} {path} timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"{method} {path} returned HTTP {status}")
            if status >= 500:
                raise RemoteUnavailable(f"{method} {path} returned HTTP {status}") from e
            raise RemoteProtocolError(f"{method} {path} returned HTTP {status}") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise RemoteUnavailable(f"{method} {path} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"{method} {path} returned a non-JSON body")
            raise RemoteProtocolError(f"{method} {path} returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise RemoteProtocolError(
                f"{method} {path} returned {type(data).__name__}, expected an object"
            )

        return to_local_format(data)

    def _parse(self, path: str, data: dict[str, Any], model: type[PayloadT]) -> PayloadT:
        """Validate a local-format body against its payload model."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected response shape from {path}: {e.error_count()} error(s)")
            raise RemoteProtocolError(f"Unexpected response shape from {path}") from e

    def _config_payload(self, config: InterviewConfig) -> dict[str, Any]:
        return config.model_dump(mode="json", by_alias=True)

    def _responses_payload(self, responses: Sequence[InterviewResponse]) -> list[dict[str, Any]]:
        return [r.model_dump(mode="json", by_alias=True) for r in responses]

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    async def generate_question(
        self,
        config: InterviewConfig,
        previous_questions: Sequence[str] = (),
        previous_responses: Sequence[InterviewResponse] = (),
        question_number: int = 1,
    ) -> str:
        """
        Generate the next interview question.

        Args:
            config: Interview configuration
            previous_questions: Texts of questions already asked
            previous_responses: Responses collected so far
            question_number: 1-based number of the question being requested

        Returns:
            Question text
        """
        if question_number < 1:
            raise ValueError("question_number must be >= 1")

        path = "/generate-question"
        data = await self._request("POST", path, {
            "config": self._config_payload(config),
            "previousQuestions": list(previous_questions),
            "previousResponses": self._responses_payload(previous_responses),
            "questionNumber": question_number,
        })
        payload = self._parse(path, data, GeneratedQuestionPayload)

        logger.info(f"Generated question #{question_number} remotely")
        return payload.question

    async def generate_followup(
        self,
        question: str,
        response: str,
        config: InterviewConfig,
    ) -> str:
        """Generate a follow-up question for an answer."""
        path = "/generate-followup"
        data = await self._request("POST", path, {
            "question": question,
            "response": response,
            "config": self._config_payload(config),
        })
        return self._parse(path, data, FollowUpPayload).follow_up

    async def analyze_response(
        self,
        question: str,
        answer: str,
        config: InterviewConfig,
    ) -> Any:
        """Analyze one answer. The analysis payload is opaque to the client."""
        path = "/analyze-response"
        data = await self._request("POST", path, {
            "question": question,
            "response": answer,
            "config": self._config_payload(config),
        })
        return self._parse(path, data, AnalysisPayload).analysis

    async def generate_analytics(
        self,
        responses: Sequence[InterviewResponse],
        config: InterviewConfig,
    ) -> AnalyticsData:
        """Generate the end-of-session analytics for all responses."""
        path = "/generate-analytics"
        data = await self._request("POST", path, {
            "responses": self._responses_payload(responses),
            "config": self._config_payload(config),
        })
        analytics = self._parse(path, data, AnalyticsPayload).analytics

        logger.info(f"Generated analytics for {len(responses)} response(s)")
        return analytics

    async def check_health(self) -> bool:
        """Check whether the service is reachable. Never raises."""
        try:
            data = await self._request("GET", "/health")
            self._parse("/health", data, HealthPayload)
        except RemoteError as e:
            logger.warning(f"Question service health check failed: {e}")
            return False
        return True
