"""Session orchestrator: recording lifecycle and transcription finalization."""

import logging
from functools import partial
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .lifecycle_publisher import LifecyclePublisher
from .session_store import SessionStore
from .settings_snapshot import resolve_settings_snapshot
from ..errors import SessionCancelled
from ..models.session import RecordingState, RecordingStateUpdate
from ..models.settings import AppSettings, SettingsSnapshot
from ..models.transcription import NewTranscription, TranscriptionRecord
from ..storage.base import TranscriptionGateway
from ..transcription.base import AbstractSpeechEngine
from ..transcription.formatter import FormattingEngine

logger = logging.getLogger(__name__)

SOURCE_TAG = "microphone"


class SessionOrchestrator:
    """Drives one recording session at a time from start to persisted transcript.

    State transitions go through the session store and are serialized there.
    Speech engine, formatter and gateway calls happen outside the store's
    lock, so a slow engine never blocks ``start``/``stop``/``cancel``.
    """

    def __init__(self,
                 store: SessionStore,
                 speech_engine: AbstractSpeechEngine,
                 gateway: TranscriptionGateway,
                 formatter: Optional[FormattingEngine] = None,
                 publisher: Optional[LifecyclePublisher] = None,
                 fallback_language: str = "en"):
        """Initialize session orchestrator.

        Args:
            store: Session store holding state, session id and settings
            speech_engine: Engine converting recorded audio to raw text
            gateway: Persistence gateway for finalized transcriptions
            formatter: Optional formatting engine for raw text cleanup
            publisher: Lifecycle event publisher
            fallback_language: Locale persisted when no language is resolved
        """
        self.store = store
        self.speech_engine = speech_engine
        self.gateway = gateway
        self.formatter = formatter
        self.publisher = publisher or LifecyclePublisher()
        self.fallback_language = fallback_language
        logger.info(f"SessionOrchestrator initialized with speech engine: {speech_engine.name}")

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def get_state(self) -> RecordingStateUpdate:
        return self.store.current()

    def start(self) -> RecordingStateUpdate:
        """Idle -> Recording. Raises AlreadyActive if a session is live."""
        update = self.store.begin()
        logger.info(f"Recording started: {update.session_id}")
        self.publisher.publish_state(update)
        return update

    def stop(self) -> RecordingStateUpdate:
        """Recording -> Processing. Raises NotActive otherwise."""
        update = self.store.mark_processing()
        logger.info(f"Recording stopped, processing: {update.session_id}")
        self.publisher.publish_state(update)
        return update

    def cancel(self) -> None:
        """Discard any session and return to Idle. Safe from any state."""
        update = self.store.reset()
        logger.info("Session cancelled")
        self.publisher.publish_state(update)

    def process_audio_chunk(self,
                            session_id: str,
                            audio_chunk: Sequence[float],
                            recording_started_at: Optional[float] = None) -> str:
        """Accept a streamed PCM chunk.

        No voice-activity detector is attached, so the chunk is only
        inspected and an empty partial transcript is returned.
        """
        samples = np.asarray(audio_chunk, dtype=np.float32)
        peak = float(np.abs(samples).max()) if samples.size else 0.0
        logger.debug(f"Chunk for {session_id}: {samples.size} samples, peak {peak:.3f}")
        return ""

    # ------------------------------------------------------------------
    # Finalization pipeline
    # ------------------------------------------------------------------

    def finalize(self,
                 session_id: str,
                 audio_reference: Optional[str] = None,
                 started_at: Optional[float] = None,
                 stopped_at: Optional[float] = None) -> str:
        """Transcribe, optionally format, persist, and return to Idle.

        Args:
            session_id: Session to finalize; must be live and Processing
            audio_reference: Path of the recorded audio, if any
            started_at: Recording start time (unix seconds)
            stopped_at: Recording stop time (unix seconds)

        Returns:
            Final transcription text

        Raises:
            NotActive: Session is not awaiting finalization
            SpeechEngineError: Speech engine failed; the session is back to Idle
            StorageFailure: Persistence failed; the session is back to Idle
            SessionCancelled: Session was cancelled mid-pipeline; nothing persisted

        A cancel landing while the gateway write is in flight cannot undo the
        write, but no completion event is published for it.
        """
        resolver = partial(
            resolve_settings_snapshot,
            fallback_language=self.fallback_language,
            default_speech_model=self.speech_engine.name,
        )
        snapshot = self.store.begin_finalize(session_id, resolver)
        if started_at is not None and stopped_at is not None:
            logger.info(f"Finalizing {session_id}: {stopped_at - started_at:.1f}s recorded")
        else:
            logger.info(f"Finalizing {session_id}")

        try:
            raw_text = self._transcribe(audio_reference, snapshot)
            final_text, formatting_model = self._format(raw_text, snapshot)

            if not self.store.is_live(session_id):
                raise SessionCancelled(f"Session {session_id} was cancelled during finalization")

            transcription_id = self.gateway.create(NewTranscription(
                text=final_text,
                language=snapshot.persisted_language,
                audio_file=audio_reference,
                duration=None,
                speech_model=snapshot.speech_model,
                formatting_model=formatting_model,
                meta={"sessionId": session_id, "source": SOURCE_TAG},
            ))
            logger.info(f"Session {session_id} persisted as transcription {transcription_id}")
        except SessionCancelled:
            logger.warning(f"Discarding result of cancelled session {session_id}")
            raise
        except Exception as e:
            logger.error(f"Finalization of {session_id} failed: {e}")
            raise
        finally:
            still_live = self._finish(session_id)

        if still_live:
            self.publisher.publish_completion(final_text)
        else:
            logger.warning(f"Session {session_id} was cancelled while persisting, completion not published")
        return final_text

    def _transcribe(self, audio_reference: Optional[str], snapshot: SettingsSnapshot) -> str:
        if not audio_reference:
            logger.debug("No audio reference, skipping speech engine")
            return ""
        return self.speech_engine.transcribe(audio_reference, snapshot.language)

    def _format(self, raw_text: str, snapshot: SettingsSnapshot) -> Tuple[str, Optional[str]]:
        """Best-effort formatting. Any failure yields the raw text unchanged."""
        if not raw_text or self.formatter is None or not snapshot.formatting_configured():
            return raw_text, None

        try:
            formatted = self.formatter.format(
                snapshot.formatting_endpoint, snapshot.formatting_model_id, raw_text
            )
        except Exception as e:
            logger.warning(f"Formatting failed, using raw text: {e}")
            return raw_text, None

        if not formatted:
            logger.warning("Formatting returned empty text, using raw text")
            return raw_text, None
        return formatted, snapshot.formatting_model_id

    def _finish(self, session_id: str) -> bool:
        # Conditional on the id so a completed cancel is never overwritten
        if self.store.finish(session_id):
            self.publisher.publish_state(RecordingStateUpdate(state=RecordingState.IDLE))
            return True
        logger.debug(f"Session {session_id} no longer live, state left untouched")
        return False

    # ------------------------------------------------------------------
    # Settings and history
    # ------------------------------------------------------------------

    def get_settings(self) -> AppSettings:
        return self.store.settings

    def update_settings(self, settings: AppSettings) -> None:
        self.store.update_settings(settings)
        logger.info("Settings updated")

    def list_transcriptions(self, limit: int = 50, offset: int = 0) -> List[TranscriptionRecord]:
        return self.gateway.list(limit=limit, offset=offset)

    def get_transcription(self, transcription_id: int) -> Optional[TranscriptionRecord]:
        return self.gateway.get(transcription_id)

    def delete_transcription(self, transcription_id: int) -> None:
        self.gateway.delete(transcription_id)

    def delete_all_transcriptions(self) -> None:
        self.gateway.delete_all()
