"""Session store: single source of truth for the recording lifecycle."""

import uuid
import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ..errors import AlreadyActive, NotActive, StateLockError
from ..models.session import RecordingState, RecordingStateUpdate
from ..models.settings import AppSettings, SettingsSnapshot

logger = logging.getLogger(__name__)

SnapshotResolver = Callable[[AppSettings], SettingsSnapshot]


class SessionStore:
    """Holds recording state, the active session id and live settings.

    Every method takes the guard for its own critical section only. Nothing
    here calls out to an adapter.
    """

    def __init__(self, settings: Optional[AppSettings] = None, lock_timeout: float = 5.0):
        """Initialize session store.

        Args:
            settings: Initial live settings
            lock_timeout: Seconds to wait for the guard before giving up
        """
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout
        self._state = RecordingState.IDLE
        self._session_id: Optional[str] = None
        self._settings = settings or AppSettings()

    @contextmanager
    def _guard(self) -> Iterator[None]:
        if not self._lock.acquire(timeout=self._lock_timeout):
            logger.error(f"Session store lock not acquired within {self._lock_timeout}s")
            raise StateLockError(f"Could not acquire session store lock within {self._lock_timeout}s")
        try:
            yield
        finally:
            self._lock.release()

    def _update(self) -> RecordingStateUpdate:
        return RecordingStateUpdate(state=self._state, session_id=self._session_id)

    def current(self) -> RecordingStateUpdate:
        with self._guard():
            return self._update()

    def begin(self) -> RecordingStateUpdate:
        """Idle -> Recording with a fresh session id."""
        with self._guard():
            if self._state != RecordingState.IDLE:
                raise AlreadyActive(f"Recording already in progress (session {self._session_id})")
            self._session_id = str(uuid.uuid4())
            self._state = RecordingState.RECORDING
            return self._update()

    def mark_processing(self) -> RecordingStateUpdate:
        """Recording -> Processing, keeping the session id."""
        with self._guard():
            if self._state != RecordingState.RECORDING:
                raise NotActive(f"No recording in progress (state: {self._state.value})")
            self._state = RecordingState.PROCESSING
            return self._update()

    def begin_finalize(self, session_id: str, resolver: SnapshotResolver) -> SettingsSnapshot:
        """Verify the session awaits finalization and capture settings atomically.

        Args:
            session_id: Session the caller wants to finalize
            resolver: Pure function turning live settings into a snapshot

        Returns:
            Settings snapshot for the rest of the pipeline
        """
        with self._guard():
            if self._state != RecordingState.PROCESSING or self._session_id != session_id:
                raise NotActive(
                    f"Session {session_id} is not awaiting finalization "
                    f"(state: {self._state.value}, active: {self._session_id})"
                )
            return resolver(self._settings)

    def is_live(self, session_id: str) -> bool:
        with self._guard():
            return self._session_id == session_id

    def finish(self, session_id: str) -> bool:
        """Reset to Idle only if ``session_id`` is still the live session.

        Returns:
            True if the reset was applied
        """
        with self._guard():
            if self._session_id != session_id:
                return False
            self._state = RecordingState.IDLE
            self._session_id = None
            return True

    def reset(self) -> RecordingStateUpdate:
        """Unconditionally reset to Idle."""
        with self._guard():
            self._state = RecordingState.IDLE
            self._session_id = None
            return self._update()

    @property
    def settings(self) -> AppSettings:
        with self._guard():
            return self._settings.model_copy(deep=True)

    def update_settings(self, settings: AppSettings) -> None:
        with self._guard():
            self._settings = settings.model_copy(deep=True)
