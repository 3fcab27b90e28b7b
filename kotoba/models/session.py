"""Session-related data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


class RecordingState(Enum):
    """Lifecycle state of the single recording session."""
    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"


@dataclass(frozen=True)
class RecordingStateUpdate:
    """State transition notification: new state plus the live session id."""
    state: RecordingState
    session_id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {"state": self.state.value, "sessionId": self.session_id}
