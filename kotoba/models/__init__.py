"""Data models for the Kotoba dictation core."""

from .session import RecordingState, RecordingStateUpdate
from .events import TranscriptionCompleted
from .transcription import NewTranscription, TranscriptionRecord
from .settings import (
    AppSettings,
    FormatterSettings,
    DictationSettings,
    OllamaSettings,
    ModelProvidersSettings,
    UiSettings,
    SettingsSnapshot,
)

__all__ = [
    "RecordingState",
    "RecordingStateUpdate",
    "TranscriptionCompleted",
    "NewTranscription",
    "TranscriptionRecord",
    # Settings
    "AppSettings",
    "FormatterSettings",
    "DictationSettings",
    "OllamaSettings",
    "ModelProvidersSettings",
    "UiSettings",
    "SettingsSnapshot",
]
