"""Storage module for Kotoba."""

from .base import TranscriptionGateway
from .transcription_store import TranscriptionStore

__all__ = [
    "TranscriptionGateway",
    "TranscriptionStore",
]
