"""Abstract base class for speech engines."""

from abc import ABC, abstractmethod
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class AbstractSpeechEngine(ABC):
    """Abstract base class for speech-to-text engines."""

    # Identifier recorded on transcriptions produced by this engine
    name: str = "speech-engine"

    @abstractmethod
    def transcribe(self, audio_reference: str, language: Optional[str] = None) -> str:
        """Transcribe a recorded audio artifact.

        Args:
            audio_reference: Path to the recorded audio file
            language: Language code hint, or None to let the engine detect it

        Returns:
            Raw transcript text

        Raises:
            SpeechEngineUnavailable: Engine cannot be reached or initialized
            InvalidAudio: Audio artifact is missing or unreadable
            InferenceFailed: Engine ran but failed to recognize
        """
        pass
