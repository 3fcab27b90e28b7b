"""Transcription-related data models."""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any


@dataclass
class NewTranscription:
    """Write shape of a transcription handed to the persistence gateway."""
    text: str
    language: Optional[str] = None
    audio_file: Optional[str] = None
    duration: Optional[int] = None
    speech_model: Optional[str] = None
    formatting_model: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None


@dataclass
class TranscriptionRecord:
    """Persisted transcription as read back from the gateway."""
    id: int
    text: str
    timestamp: int
    created_at: int
    updated_at: int
    language: Optional[str] = None
    audio_file: Optional[str] = None
    confidence: Optional[float] = None
    duration: Optional[int] = None
    speech_model: Optional[str] = None
    formatting_model: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscriptionRecord":
        return cls(**data)
