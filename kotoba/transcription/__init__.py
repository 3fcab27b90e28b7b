"""Transcription module for Kotoba."""

from .base import AbstractSpeechEngine
from .formatter import FormattingEngine, extract_formatted_text
from .google_backend import GoogleSpeechEngine
from .ollama_formatter import OllamaFormatter

__all__ = [
    "AbstractSpeechEngine",
    "FormattingEngine",
    "extract_formatted_text",
    "GoogleSpeechEngine",
    "OllamaFormatter",
]
