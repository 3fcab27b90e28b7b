"""Event models published on lifecycle topics."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any


@dataclass(frozen=True)
class TranscriptionCompleted:
    """Emitted once a finalize pipeline produced its final text."""
    text: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_payload(self) -> Dict[str, Any]:
        return {"text": self.text}
