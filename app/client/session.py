"""Client session store: current user, tokens and the scheduled access-token refresh.

State machine::

    ANONYMOUS -> AUTHENTICATING -> AUTHENTICATED -> REFRESHING -> AUTHENTICATED
                       |                 |                 \\-> ANONYMOUS (refresh failed)
                       \\-> ANONYMOUS     \\-> ANONYMOUS (logout)

A session is an explicit object handed to whoever needs it. The refresh job
belongs to the session: logout and close() cancel it.
"""

import enum
import threading
import uuid
from datetime import timedelta
from typing import Any, Callable, Optional

import pytz
import structlog
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.client.storage import LocalStorage
from app.config import get_settings

logger = structlog.get_logger(__name__)

AUTH_STORAGE_KEY = "auth-storage"

Refresher = Callable[[str], Optional[str]]


class SessionState(str, enum.Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


class SessionStore:
    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        refresher: Optional[Refresher] = None,
        scheduler: Optional[BaseScheduler] = None,
        refresh_interval: Optional[timedelta] = None,
    ):
        settings = get_settings()
        self.storage = storage or LocalStorage()
        self.refresher = refresher
        self.refresh_interval = refresh_interval or timedelta(minutes=settings.SESSION_REFRESH_INTERVAL_MINUTES)
        self.session_id = uuid.uuid4().hex

        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._job = None
        self._lock = threading.RLock()

        self.user: Optional[dict[str, Any]] = None
        self.access_token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.remember_me = False
        self.state = SessionState.ANONYMOUS

    @property
    def is_auth(self) -> bool:
        return self.state in (SessionState.AUTHENTICATED, SessionState.REFRESHING)

    @property
    def is_loading(self) -> bool:
        return self.state == SessionState.AUTHENTICATING

    @property
    def role(self) -> Optional[str]:
        return (self.user or {}).get("role")

    @property
    def refresh_scheduled(self) -> bool:
        return self._job is not None

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _persist(self) -> None:
        snapshot: dict[str, Any] = {
            "user": self.user,
            "rememberMe": self.remember_me,
            "isAuth": self.is_auth,
        }
        # Tokens only survive the process when the user asked to be remembered
        if self.remember_me:
            snapshot["accessToken"] = self.access_token
            snapshot["refreshToken"] = self.refresh_token
        self.storage.set_item(AUTH_STORAGE_KEY, snapshot)

    def initialize_auth(self) -> bool:
        """Restore a remembered session on startup; otherwise purge any stored tokens."""
        with self._lock:
            saved = self.storage.get_item(AUTH_STORAGE_KEY) or {}
            if saved.get("rememberMe") and saved.get("accessToken") and saved.get("refreshToken"):
                self.user = saved.get("user")
                self.access_token = saved["accessToken"]
                self.refresh_token = saved["refreshToken"]
                self.remember_me = True
                self.state = SessionState.AUTHENTICATED
                self._persist()
                self._schedule_refresh()
                logger.info("Session restored", session_id=self.session_id)
                return True

            self._clear()
            self._persist()
            return False

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin_login(self) -> None:
        with self._lock:
            self.state = SessionState.AUTHENTICATING

    def login_failed(self) -> None:
        with self._lock:
            if self.state == SessionState.AUTHENTICATING:
                self.state = SessionState.ANONYMOUS

    def login(self, user: dict[str, Any], access_token: str, refresh_token: str, remember_me: bool = False) -> None:
        with self._lock:
            self.user = user
            self.access_token = access_token
            self.refresh_token = refresh_token
            self.remember_me = remember_me
            self.state = SessionState.AUTHENTICATED
            self._persist()
            self._schedule_refresh()
        logger.info("Session started", session_id=self.session_id, remember_me=remember_me)

    def logout(self) -> None:
        with self._lock:
            self._cancel_refresh()
            self._clear()
            self._persist()
        logger.info("Session ended", session_id=self.session_id)

    def set_user(self, user: dict[str, Any]) -> None:
        with self._lock:
            self.user = user
            self._persist()

    def set_token(self, access_token: Optional[str]) -> None:
        with self._lock:
            self.access_token = access_token
            if not access_token:
                self.state = SessionState.ANONYMOUS
            elif self.state == SessionState.ANONYMOUS:
                self.state = SessionState.AUTHENTICATED
            self._persist()

    def refresh(self) -> bool:
        """Timer callback: swap in a fresh access token, or log out when that fails."""
        with self._lock:
            if self.state != SessionState.AUTHENTICATED or not self.refresh_token:
                return False
            self.state = SessionState.REFRESHING
            refresh_token = self.refresh_token

        new_token = None
        if self.refresher is not None:
            try:
                new_token = self.refresher(refresh_token)
            except Exception:
                logger.exception("Token refresh raised", session_id=self.session_id)

        with self._lock:
            if self.state != SessionState.REFRESHING:
                # Logged out while the request was in flight
                return False
            if new_token:
                self.access_token = new_token
                self.state = SessionState.AUTHENTICATED
                self._persist()
                logger.info("Access token refreshed", session_id=self.session_id)
                return True

        logger.warning("Token refresh failed, logging out", session_id=self.session_id)
        self.logout()
        return False

    def close(self) -> None:
        """Tear down the session's background work; stored state is left as is."""
        with self._lock:
            self._cancel_refresh()
            if self._owns_scheduler and self._scheduler is not None and self._scheduler.running:
                self._scheduler.shutdown(wait=False)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _clear(self) -> None:
        self.user = None
        self.access_token = None
        self.refresh_token = None
        self.remember_me = False
        self.state = SessionState.ANONYMOUS

    def _ensure_scheduler(self) -> BaseScheduler:
        if self._scheduler is None:
            self._scheduler = BackgroundScheduler(timezone=pytz.utc)
        if self._owns_scheduler and not self._scheduler.running:
            self._scheduler.start()
        return self._scheduler

    def _schedule_refresh(self) -> None:
        self._cancel_refresh()
        scheduler = self._ensure_scheduler()
        self._job = scheduler.add_job(
            self.refresh,
            trigger=IntervalTrigger(seconds=self.refresh_interval.total_seconds(), timezone=pytz.utc),
            id=f"session-refresh-{self.session_id}",
            name="Session access token refresh",
            replace_existing=True,
        )

    def _cancel_refresh(self) -> None:
        if self._job is None:
            return
        try:
            self._job.remove()
        except JobLookupError:
            pass
        self._job = None
