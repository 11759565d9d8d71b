from datetime import timedelta

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from app.client.session import AUTH_STORAGE_KEY, SessionState, SessionStore
from app.client.storage import LocalStorage

USER = {"id": 7, "email": "user@example.com", "role": "USER"}


@pytest.fixture
def scheduler():
    # Never started: jobs stay pending and can be inspected
    return BackgroundScheduler()


@pytest.fixture
def storage():
    return LocalStorage()


def _job_id(session):
    return f"session-refresh-{session.session_id}"


def test_starts_anonymous(storage, scheduler):
    session = SessionStore(storage, scheduler=scheduler)
    assert session.state == SessionState.ANONYMOUS
    assert not session.is_auth
    assert not session.is_loading


def test_login_flow_states(storage, scheduler):
    session = SessionStore(storage, scheduler=scheduler)

    session.begin_login()
    assert session.is_loading

    session.login(USER, "access", "refresh")
    assert session.state == SessionState.AUTHENTICATED
    assert session.is_auth
    assert session.role == "USER"
    assert scheduler.get_job(_job_id(session)) is not None


def test_failed_login_returns_to_anonymous(storage, scheduler):
    session = SessionStore(storage, scheduler=scheduler)
    session.begin_login()
    session.login_failed()
    assert session.state == SessionState.ANONYMOUS


def test_refresh_job_interval(storage, scheduler):
    session = SessionStore(storage, scheduler=scheduler, refresh_interval=timedelta(minutes=14))
    session.login(USER, "access", "refresh")

    job = scheduler.get_job(_job_id(session))
    assert job.trigger.interval == timedelta(minutes=14)


def test_logout_cancels_refresh(storage, scheduler):
    session = SessionStore(storage, scheduler=scheduler)
    session.login(USER, "access", "refresh", remember_me=True)

    session.logout()

    assert session.state == SessionState.ANONYMOUS
    assert session.user is None
    assert session.access_token is None
    assert scheduler.get_job(_job_id(session)) is None
    assert not session.refresh_scheduled
    assert "accessToken" not in storage.get_item(AUTH_STORAGE_KEY)


def test_login_twice_keeps_one_job(storage, scheduler):
    session = SessionStore(storage, scheduler=scheduler)
    session.login(USER, "a1", "r1")
    session.login(USER, "a2", "r2")

    assert len([j for j in scheduler.get_jobs() if j.id == _job_id(session)]) == 1


def test_refresh_success(storage, scheduler):
    seen = []

    def refresher(token):
        seen.append(token)
        return "new-access"

    session = SessionStore(storage, refresher=refresher, scheduler=scheduler)
    session.login(USER, "old-access", "refresh")

    assert session.refresh() is True
    assert seen == ["refresh"]
    assert session.access_token == "new-access"
    assert session.state == SessionState.AUTHENTICATED


def test_refresh_failure_logs_out(storage, scheduler):
    session = SessionStore(storage, refresher=lambda token: None, scheduler=scheduler)
    session.login(USER, "access", "refresh")

    assert session.refresh() is False
    assert session.state == SessionState.ANONYMOUS
    assert scheduler.get_job(_job_id(session)) is None


def test_refresh_error_logs_out(storage, scheduler):
    def refresher(token):
        raise RuntimeError("backend down")

    session = SessionStore(storage, refresher=refresher, scheduler=scheduler)
    session.login(USER, "access", "refresh")

    assert session.refresh() is False
    assert not session.is_auth


def test_refresh_when_anonymous_is_noop(storage, scheduler):
    calls = []
    session = SessionStore(storage, refresher=calls.append, scheduler=scheduler)
    assert session.refresh() is False
    assert calls == []


def test_tokens_not_persisted_without_remember_me(storage, scheduler):
    session = SessionStore(storage, scheduler=scheduler)
    session.login(USER, "access", "refresh", remember_me=False)

    saved = storage.get_item(AUTH_STORAGE_KEY)
    assert saved["user"] == USER
    assert "accessToken" not in saved
    assert "refreshToken" not in saved


def test_remembered_session_is_restored(tmp_path, scheduler):
    path = str(tmp_path / "storage.json")
    first = SessionStore(LocalStorage(path), scheduler=scheduler)
    first.login(USER, "access", "refresh", remember_me=True)
    first.close()

    second = SessionStore(LocalStorage(path), scheduler=scheduler)

    assert second.initialize_auth() is True
    assert second.is_auth
    assert second.access_token == "access"
    assert second.refresh_token == "refresh"
    assert scheduler.get_job(_job_id(second)) is not None


def test_unremembered_session_is_purged(tmp_path, scheduler):
    path = str(tmp_path / "storage.json")
    SessionStore(LocalStorage(path), scheduler=scheduler).login(USER, "access", "refresh")

    restored = SessionStore(LocalStorage(path), scheduler=scheduler)

    assert restored.initialize_auth() is False
    assert not restored.is_auth
    assert LocalStorage(path).get_item(AUTH_STORAGE_KEY)["user"] is None


def test_set_token(storage, scheduler):
    session = SessionStore(storage, scheduler=scheduler)
    session.login(USER, "access", "refresh")

    session.set_token("rotated")
    assert session.access_token == "rotated"

    session.set_token(None)
    assert session.state == SessionState.ANONYMOUS
