"""Google Speech-to-Text engine."""

import time
import logging
from pathlib import Path
from typing import Optional

import numpy as np
from scipy.io import wavfile

from .base import AbstractSpeechEngine
from ..errors import InferenceFailed, InvalidAudio, SpeechEngineUnavailable

from google.auth import exceptions as auth_exceptions
from google.cloud import speech
from google.api_core import exceptions as gax_exceptions
from google.oauth2 import service_account

logger = logging.getLogger(__name__)


def load_wav_as_pcm16(audio_path: str) -> tuple:
    """Read a WAV file and return ``(sample_rate, mono 16-bit PCM bytes)``.

    Raises:
        InvalidAudio: If the file is missing, unreadable or empty
    """
    path = Path(audio_path)
    if not path.is_file():
        raise InvalidAudio(f"Audio file not found: {audio_path}")

    try:
        sample_rate, data = wavfile.read(str(path))
    except (ValueError, OSError) as e:
        raise InvalidAudio(f"Unreadable audio file {audio_path}: {e}") from e

    if data.size == 0:
        raise InvalidAudio(f"Audio file is empty: {audio_path}")

    source_dtype = data.dtype
    if data.ndim > 1:
        data = data.mean(axis=1)

    if np.issubdtype(source_dtype, np.floating):
        pcm = np.clip(data, -1.0, 1.0) * 32767
    elif source_dtype == np.uint8:
        pcm = (data.astype(np.float64) - 128) * 256
    elif source_dtype == np.int32:
        pcm = data.astype(np.float64) / 65536
    else:
        pcm = data

    return int(sample_rate), np.round(pcm).astype(np.int16).tobytes()


class GoogleSpeechEngine(AbstractSpeechEngine):
    """Google Speech-to-Text API engine for finalized recordings."""

    name = "google-speech"

    def __init__(self,
                 credentials_path: Optional[str] = None,
                 default_language: str = "en-US",
                 use_enhanced: bool = True,
                 enable_automatic_punctuation: bool = True,
                 timeout: float = 30.0):
        """Initialize Google Speech engine.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
            default_language: Language code used when no hint is given
            use_enhanced: Whether to use enhanced model (costs more but better quality)
            enable_automatic_punctuation: Enable automatic punctuation
            timeout: Per-request deadline in seconds
        """
        if not credentials_path:
            raise ValueError("Google credentials path is required - cannot initialize without credentials")
        self.credentials_path = credentials_path
        self.default_language = default_language
        self.use_enhanced = use_enhanced
        self.enable_automatic_punctuation = enable_automatic_punctuation
        self.timeout = timeout
        self.client = None
        self.project_id = None

    def initialize(self) -> None:
        """Initialize Google Speech client from the service account file."""
        logger.info(f"Loading Google credentials from: {self.credentials_path}")
        try:
            credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
        except (OSError, ValueError, auth_exceptions.GoogleAuthError) as e:
            raise SpeechEngineUnavailable(f"Invalid Google credentials: {e}") from e

        self.client = speech.SpeechClient(credentials=credentials)
        self.project_id = credentials.project_id
        logger.info(f"Google Speech-to-Text engine initialized (project: {self.project_id})")

    def transcribe(self, audio_reference: str, language: Optional[str] = None) -> str:
        """Transcribe a WAV file using Google Speech-to-Text."""
        sample_rate, pcm = load_wav_as_pcm16(audio_reference)

        if self.client is None:
            self.initialize()

        language_code = language or self.default_language
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=sample_rate,
            language_code=language_code,
            use_enhanced=self.use_enhanced,
            enable_automatic_punctuation=self.enable_automatic_punctuation,
            model="latest_long",
        )
        audio = speech.RecognitionAudio(content=pcm)

        logger.debug(f"Audio: {audio_reference}; {len(pcm)} bytes at {sample_rate}Hz; Language: {language_code}")
        start_time = time.time()
        try:
            response = self.client.recognize(config=config, audio=audio, timeout=self.timeout)
        except (gax_exceptions.DeadlineExceeded, gax_exceptions.ServiceUnavailable) as e:
            logger.error("Google STT unavailable for %s: %s", audio_reference, e)
            raise SpeechEngineUnavailable(f"Google Speech unavailable: {e}") from e
        except gax_exceptions.GoogleAPICallError as e:
            logger.error("Google STT API call error for %s: %s", audio_reference, e)
            raise InferenceFailed(f"Google Speech API error: {e}") from e
        processing_time = time.time() - start_time

        transcripts = [
            result.alternatives[0].transcript.strip()
            for result in response.results
            if result.alternatives
        ]
        text = " ".join(t for t in transcripts if t)
        logger.info(f"Google STT recognized {len(text)} chars in {processing_time:.3f}s")
        return text
