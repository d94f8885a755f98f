"""
Interview Orchestrator - State machine for a single interview session.

Coordinates the remote question client and the fallback question bank,
tracks asked questions and collected responses, and hands the responses to
the remote analytics operation when the session ends.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable

from interview_sim.core.fallback_bank import FallbackQuestionBank
from interview_sim.core.progress import session_progress
from interview_sim.core.question_client import QuestionServiceClient, RemoteError
from interview_sim.models.interview import (
    AnalyticsData,
    InterviewConfig,
    InterviewResponse,
    Progress,
    Question,
    QuestionSource,
    SessionMode,
    SessionPhase,
    SessionState,
)

logger = logging.getLogger(__name__)


class InvalidStateError(Exception):
    """Raised when a call is made out of sequence for the session."""
    pass


class InterviewOrchestrator:
    """
    Manages one interview session using a state machine pattern.

    Phases:
        NOT_STARTED → ACTIVE ⇄ PAUSED
                         ↓        ↓
                         ENDED (terminal)

    Questions come from the remote client while the session is ONLINE. The
    first remote failure switches the session to FALLBACK for good, and from
    then on questions come from the local bank.

    At most one question fetch may be in flight. Analysis requests run in
    the background and are attached to the response they were requested for.
    """

    VALID_TRANSITIONS: dict[SessionPhase, list[SessionPhase]] = {
        SessionPhase.NOT_STARTED: [SessionPhase.ACTIVE, SessionPhase.ENDED],
        SessionPhase.ACTIVE: [SessionPhase.PAUSED, SessionPhase.ENDED],
        SessionPhase.PAUSED: [SessionPhase.ACTIVE, SessionPhase.ENDED],
        SessionPhase.ENDED: [],  # Terminal state
    }

    def __init__(
        self,
        config: InterviewConfig,
        client: QuestionServiceClient,
        fallback_bank: FallbackQuestionBank | None = None,
    ):
        """
        Initialize the orchestrator for one session.

        Args:
            config: Interview configuration
            client: Remote question client
            fallback_bank: Local question source used once the client fails
        """
        self.config = config
        self.client = client
        self.fallback_bank = fallback_bank or FallbackQuestionBank()

        self.state = SessionState()

        # Advisory only, set by check_connection()
        self.remote_healthy: bool | None = None

        self._fetch_in_flight = False
        self._analysis_tasks: dict[int, asyncio.Task] = {}
        self._analytics: AnalyticsData | None = None
        self._analytics_task: asyncio.Task | None = None

        self._state_change_callbacks: list[Callable[[SessionPhase, SessionPhase], Any]] = []

    # =========================================================================
    # STATE MACHINE
    # =========================================================================

    def _transition(self, new_phase: SessionPhase) -> None:
        """
        Move the session to a new phase.

        Raises:
            InvalidStateError: If the transition is not allowed
        """
        old_phase = self.state.phase

        valid_next = self.VALID_TRANSITIONS.get(old_phase, [])
        if new_phase not in valid_next:
            raise InvalidStateError(
                f"Invalid transition from {old_phase.value} to {new_phase.value}. "
                f"Valid transitions: {[p.value for p in valid_next]}"
            )

        self.state.phase = new_phase

        if new_phase == SessionPhase.ACTIVE and self.state.started_at is None:
            self.state.started_at = datetime.utcnow()
        elif new_phase == SessionPhase.ENDED:
            self.state.ended_at = datetime.utcnow()
            self.state.current_question = None

        for callback in self._state_change_callbacks:
            try:
                callback(old_phase, new_phase)
            except Exception as e:
                logger.error(f"State change callback error: {e}")

        logger.info(f"Session: {old_phase.value} → {new_phase.value}")

    def _require_phase(self, phase: SessionPhase, action: str) -> None:
        if self.state.phase != phase:
            raise InvalidStateError(
                f"Cannot {action} while session is {self.state.phase.value}"
            )

    def _complete(self, reason: str) -> None:
        """End the session. Safe to call when already ended."""
        if self.state.phase == SessionPhase.ENDED:
            return
        self.state.end_reason = reason
        self._transition(SessionPhase.ENDED)
        logger.info(
            f"Session ended ({reason}) after {len(self.state.asked_questions)} question(s), "
            f"{len(self.state.responses)} response(s)"
        )

    def on_state_change(self, callback: Callable[[SessionPhase, SessionPhase], Any]) -> None:
        """Register a callback for phase changes."""
        self._state_change_callbacks.append(callback)

    # =========================================================================
    # SESSION FLOW
    # =========================================================================

    def start(self) -> None:
        """Start the session."""
        if self.state.phase != SessionPhase.NOT_STARTED:
            raise InvalidStateError("Session has already been started")
        self._transition(SessionPhase.ACTIVE)

    def pause(self) -> None:
        """
        Pause the session.

        A question request already in flight is not cancelled; its result
        is applied if it still matches the session position when it lands.
        """
        self._require_phase(SessionPhase.ACTIVE, "pause")
        self._transition(SessionPhase.PAUSED)

    def resume(self) -> None:
        """Resume a paused session."""
        self._require_phase(SessionPhase.PAUSED, "resume")
        self._transition(SessionPhase.ACTIVE)

    async def next_question(self) -> Question | None:
        """
        Fetch and issue the next question.

        Returns:
            The issued question, or None when the interview is complete.
            A None result ends the session; call ``end()`` for analytics.

        Raises:
            InvalidStateError: Session not active, a fetch is already in
                flight, or the current question is unanswered
        """
        self._require_phase(SessionPhase.ACTIVE, "fetch a question")
        if self._fetch_in_flight:
            raise InvalidStateError("A question request is already in flight")
        if self.state.current_question is not None:
            raise InvalidStateError(
                f"Question {self.state.current_question.index} has not been answered yet"
            )

        position = len(self.state.asked_questions)
        if position >= self.config.max_questions:
            self._complete("max_questions_reached")
            return None

        self._fetch_in_flight = True
        try:
            text, source = await self._fetch_question_text(position)
        finally:
            self._fetch_in_flight = False

        # The session may have moved on while the request was pending
        if self.state.phase == SessionPhase.ENDED or len(self.state.asked_questions) != position:
            logger.info(f"Discarding stale question for position {position}")
            return None

        if text is None:
            self._complete("questions_exhausted")
            return None

        question = Question(index=position, text=text, source=source)
        self.state.asked_questions.append(question)
        self.state.current_question = question

        logger.info(
            f"Issued question {position + 1}/{self.config.max_questions} "
            f"from {source.value}"
        )
        return question

    async def _fetch_question_text(self, position: int) -> tuple[str | None, QuestionSource]:
        """Get question text from the remote client, or the bank in fallback mode."""
        if self.state.mode == SessionMode.ONLINE:
            try:
                text = await self.client.generate_question(
                    self.config,
                    previous_questions=[q.text for q in self.state.asked_questions],
                    previous_responses=list(self.state.responses),
                    question_number=position + 1,
                )
                return text, QuestionSource.REMOTE
            except RemoteError as e:
                logger.warning(f"Question generation failed ({type(e).__name__}): {e}")
                # A failure landing after the session moved on must not touch it
                if self.state.phase == SessionPhase.ENDED or len(self.state.asked_questions) != position:
                    return None, QuestionSource.REMOTE
                self._enter_fallback()

        text = self.fallback_bank.next(self.config.category, position)
        return text, QuestionSource.FALLBACK

    def _enter_fallback(self) -> None:
        if self.state.mode == SessionMode.FALLBACK:
            return
        self.state.mode = SessionMode.FALLBACK
        logger.warning("Switched to fallback question bank for the rest of the session")

    def force_fallback(self) -> None:
        """Switch to the fallback bank without waiting for a remote failure."""
        if self.state.phase == SessionPhase.ENDED:
            raise InvalidStateError("Session has ended")
        self._enter_fallback()

    async def submit_response(self, text: str) -> InterviewResponse:
        """
        Record the answer to the current question.

        Analysis is requested in the background and attached to the
        returned response when it arrives. Reaching the question limit ends
        the session.

        Recording never suspends, so a second submission racing this one
        always finds the question already answered and is rejected.

        Raises:
            InvalidStateError: Session not active, empty text, or no
                question pending
        """
        self._require_phase(SessionPhase.ACTIVE, "submit a response")

        answer = (text or "").strip()
        if not answer:
            raise InvalidStateError("Response text must not be empty")

        question = self.state.current_question
        if question is None:
            raise InvalidStateError("No question is pending")

        response = InterviewResponse(
            question_index=question.index,
            question_text=question.text,
            answer_text=answer,
            timestamp_issued=question.issued_at,
        )
        self.state.responses.append(response)
        self.state.current_question = None

        self._schedule_analysis(response)

        if len(self.state.responses) >= self.config.max_questions:
            self._complete("max_questions_reached")

        return response

    async def end(self, reason: str = "user_ended") -> AnalyticsData:
        """
        End the session and generate analytics for the responses so far.

        Raises:
            RemoteError: Analytics generation failed; responses are kept and
                ``generate_analytics()`` may be retried
        """
        self._complete(reason)
        return await self.generate_analytics()

    async def end_early(self) -> AnalyticsData:
        """End the session before the question limit is reached."""
        return await self.end(reason="ended_early")

    async def generate_analytics(self) -> AnalyticsData:
        """
        Request analytics for the ended session.

        Overlapping callers share one request. A successful result is cached;
        after a failure the next call sends a fresh request.
        """
        self._require_phase(SessionPhase.ENDED, "generate analytics")
        if self._analytics is not None:
            return self._analytics

        if self._analytics_task is None:
            self._analytics_task = asyncio.create_task(
                self._request_analytics(), name="generate-analytics"
            )
        task = self._analytics_task

        try:
            return await asyncio.shield(task)
        except RemoteError:
            if self._analytics_task is task:
                self._analytics_task = None
            raise

    async def _request_analytics(self) -> AnalyticsData:
        await self._settle_analyses()
        analytics = await self.client.generate_analytics(list(self.state.responses), self.config)

        self._analytics = analytics
        return analytics

    # =========================================================================
    # BACKGROUND ANALYSIS
    # =========================================================================

    def _schedule_analysis(self, response: InterviewResponse) -> None:
        index = response.question_index
        task = asyncio.create_task(
            self.client.analyze_response(response.question_text, response.answer_text, self.config),
            name=f"analyze-response-{index}",
        )
        self._analysis_tasks[index] = task
        task.add_done_callback(lambda t, i=index: self._attach_analysis(i, t))

    def _attach_analysis(self, index: int, task: asyncio.Task) -> None:
        """Store a finished analysis on the response it was requested for."""
        if self._analysis_tasks.get(index) is task:
            del self._analysis_tasks[index]

        if task.cancelled():
            return

        error = task.exception()
        if isinstance(error, RemoteError):
            logger.info(f"No analysis for response {index}: {error}")
            return
        if error is not None:
            logger.error(f"Analysis for response {index} failed unexpectedly: {error!r}")
            return

        response = self.state.get_response(index)
        if response is None:
            logger.debug(f"Discarding analysis for unknown response {index}")
            return
        response.analysis = task.result()

    async def _settle_analyses(self) -> None:
        """Wait for outstanding analysis requests to finish."""
        pending = list(self._analysis_tasks.values())
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def pending_analyses(self) -> int:
        """Number of analysis requests still running."""
        return len(self._analysis_tasks)

    async def aclose(self) -> None:
        """Cancel outstanding background work."""
        tasks = list(self._analysis_tasks.values())
        if self._analytics_task is not None and not self._analytics_task.done():
            tasks.append(self._analytics_task)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._analysis_tasks.clear()
        if self._analytics is None:
            self._analytics_task = None

    # =========================================================================
    # QUERIES
    # =========================================================================

    async def check_connection(self) -> bool:
        """Check the remote service health. Advisory; never changes the session mode."""
        self.remote_healthy = await self.client.check_health()
        return self.remote_healthy

    async def suggest_followup(self) -> str | None:
        """
        Ask the remote service for a follow-up to the latest response.

        Best-effort: returns None in fallback mode, when nothing has been
        answered yet, or when the request fails.
        """
        if self.state.mode != SessionMode.ONLINE or not self.state.responses:
            return None

        latest = self.state.responses[-1]
        try:
            return await self.client.generate_followup(
                latest.question_text, latest.answer_text, self.config
            )
        except RemoteError as e:
            logger.info(f"No follow-up available: {e}")
            return None

    def progress(self) -> Progress:
        """Progress through the session."""
        return session_progress(self.state, self.config.max_questions)

    @property
    def is_complete(self) -> bool:
        return self.state.phase == SessionPhase.ENDED

    @property
    def responses(self) -> list[InterviewResponse]:
        return list(self.state.responses)

    def elapsed_seconds(self) -> float:
        """Wall-clock time since the session started."""
        return self.state.get_duration_seconds()

    def export_responses(self) -> list[dict[str, Any]]:
        """Responses in local format, for manual export."""
        return [r.model_dump(mode="json", by_alias=True) for r in self.state.responses]
