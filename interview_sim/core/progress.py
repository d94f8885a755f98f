"""
Progress Reporter - read-only projection of session progress.
"""

from interview_sim.models.interview import Progress, SessionState


def compute_progress(current: int, total: int) -> Progress:
    """
    Derive progress from a question count and the session limit.

    ``current`` is clamped to ``[0, total]`` and the percentage saturates at
    100. A non-positive total yields 0%.
    """
    if total <= 0:
        return Progress(current=0, total=max(total, 0), percentage=0.0)

    current = max(0, min(current, total))
    return Progress(
        current=current,
        total=total,
        percentage=min(100.0, 100.0 * current / total),
    )


def session_progress(state: SessionState, max_questions: int) -> Progress:
    """Progress of a session, counted in asked questions."""
    return compute_progress(len(state.asked_questions), max_questions)
