"""Tests for focus session lifecycle: single active session, lazy expiry."""
from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from app.domain.focus_session_operations import FocusSessionOperations
from app.models.database.focus_sessions import FocusSession

NOW = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


def active_rows(session, user_id):
    return session.execute(
        select(FocusSession).where(
            FocusSession.user_id == user_id,
            FocusSession.is_active.is_(True),
        )
    ).scalars().all()


def test_activate_sets_expiry(db_session, user):
    focus = FocusSessionOperations.activate(db_session, user.id, ["golf"], 150, 2, now=NOW)

    assert focus.expires_at == NOW + timedelta(hours=2)
    assert focus.boost_factor == 150
    assert focus.is_active is True


def test_new_activation_replaces_previous(db_session, user):
    FocusSessionOperations.activate(db_session, user.id, ["golf"], 150, 2, now=NOW)
    second = FocusSessionOperations.activate(db_session, user.id, ["work"], 300, 1, now=NOW)
    db_session.expire_all()

    rows = active_rows(db_session, user.id)
    assert [row.id for row in rows] == [second.id]

    current = FocusSessionOperations.get_active(db_session, user.id, now=NOW)
    assert current.categories == ["work"]


def test_expired_session_is_ignored_but_stays_flagged(db_session, user):
    FocusSessionOperations.activate(db_session, user.id, ["golf"], 200, 1, now=NOW)

    assert FocusSessionOperations.get_active(db_session, user.id, now=NOW + timedelta(minutes=59)) is not None
    assert FocusSessionOperations.get_active(db_session, user.id, now=NOW + timedelta(hours=1)) is None
    assert len(active_rows(db_session, user.id)) == 1


def test_deactivate_is_idempotent(db_session, user):
    FocusSessionOperations.activate(db_session, user.id, ["golf"], 200, 1, now=NOW)

    assert FocusSessionOperations.deactivate_all(db_session, user.id) == 1
    assert FocusSessionOperations.deactivate_all(db_session, user.id) == 0
    assert FocusSessionOperations.get_active(db_session, user.id, now=NOW) is None


def test_sessions_are_scoped_per_user(db_session, user, other_user):
    FocusSessionOperations.activate(db_session, user.id, ["golf"], 200, 1, now=NOW)

    assert FocusSessionOperations.get_active(db_session, other_user.id, now=NOW) is None
    assert FocusSessionOperations.deactivate_all(db_session, other_user.id) == 0
