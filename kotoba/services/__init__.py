"""Services layer for Kotoba session orchestration."""

from .lifecycle_publisher import LifecyclePublisher
from .session_orchestrator import SessionOrchestrator
from .session_store import SessionStore
from .settings_snapshot import resolve_settings_snapshot

__all__ = [
    "LifecyclePublisher",
    "SessionOrchestrator",
    "SessionStore",
    "resolve_settings_snapshot",
]
