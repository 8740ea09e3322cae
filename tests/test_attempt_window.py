import pytest

from online_quiz.errors import AttemptExpired
from online_quiz.services.attempt_window import AttemptWindowRegistry


def test_no_recorded_start_is_accepted(windows):
    windows.check("user-1", "T1", 600)


def test_reopening_restarts_window(windows, clock):
    windows.open("user-1", "T1", 600)
    clock.advance(1000)
    windows.open("user-1", "T1", 600)

    windows.check("user-1", "T1", 600)


def test_expired_reports_overdue(windows, clock):
    windows.open("user-1", "T1", 60)
    clock.advance(60 + 30 + 5)

    with pytest.raises(AttemptExpired) as exc:
        windows.check("user-1", "T1", 60)
    assert exc.value.overdue_seconds == pytest.approx(5)


def test_not_enforced_only_logs(clock):
    windows = AttemptWindowRegistry(grace_seconds=0, enforce=False, clock=clock)
    windows.open("user-1", "T1", 60)
    clock.advance(3600)

    windows.check("user-1", "T1", 60)


def test_cleanup_keeps_entries_within_retention(clock):
    windows = AttemptWindowRegistry(grace_seconds=0, retention_seconds=100, clock=clock)
    windows.open("user-1", "T1", 60)
    windows.open("user-2", "T1", 600)

    clock.advance(60 + 50)
    assert windows.cleanup_expired() == 0

    clock.advance(60)
    assert windows.cleanup_expired() == 1
    assert windows.started_at("user-1", "T1") is None
    assert windows.started_at("user-2", "T1") is not None
