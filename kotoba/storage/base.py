"""Persistence gateway contract for transcriptions."""

from typing import List, Optional, Protocol

from ..models.transcription import NewTranscription, TranscriptionRecord


class TranscriptionGateway(Protocol):
    """Durable store for finalized transcriptions.

    Every method raises StorageFailure when the backing store fails.
    """

    def create(self, transcription: NewTranscription) -> int:
        ...

    def list(self, limit: int = 50, offset: int = 0) -> List[TranscriptionRecord]:
        ...

    def get(self, transcription_id: int) -> Optional[TranscriptionRecord]:
        ...

    def delete(self, transcription_id: int) -> None:
        ...

    def delete_all(self) -> None:
        ...
