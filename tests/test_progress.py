# tests/test_progress.py
import pytest

from interview_sim.core.progress import compute_progress, session_progress
from interview_sim.models.interview import Question, SessionState


@pytest.mark.parametrize("current, total, expected", [
    (0, 3, (0, 3, 0.0)),
    (1, 4, (1, 4, 25.0)),
    (3, 3, (3, 3, 100.0)),
    (5, 3, (3, 3, 100.0)),
    (-2, 3, (0, 3, 0.0)),
    (0, 0, (0, 0, 0.0)),
    (4, 0, (0, 0, 0.0)),
])
def test_compute_progress(current, total, expected):
    progress = compute_progress(current, total)
    assert (progress.current, progress.total, progress.percentage) == expected


def test_session_progress_counts_asked_questions():
    state = SessionState(asked_questions=[Question(index=0, text="a"), Question(index=1, text="b")])
    progress = session_progress(state, 4)

    assert progress.current == 2
    assert progress.percentage == 50.0
