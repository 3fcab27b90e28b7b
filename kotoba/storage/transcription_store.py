"""File-backed transcription store."""

import json
import time
import logging
import threading
from pathlib import Path
from typing import List, Optional

from ..errors import StorageFailure
from ..models.transcription import NewTranscription, TranscriptionRecord

logger = logging.getLogger(__name__)


class TranscriptionStore:
    """Stores each transcription as a JSON document under the data directory."""

    def __init__(self, data_dir: str = "./data"):
        """Initialize transcription store with data directory.

        Args:
            data_dir: Base directory for storing all data
        """
        self.data_dir = Path(data_dir)
        self.transcriptions_dir = self.data_dir / "transcriptions"
        self._lock = threading.Lock()

        try:
            self.transcriptions_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFailure(f"Cannot create {self.transcriptions_dir}: {e}") from e

        self._next_id = self._scan_max_id() + 1
        logger.info(f"TranscriptionStore initialized with data_dir: {self.data_dir}")

    def _record_path(self, transcription_id: int) -> Path:
        return self.transcriptions_dir / f"{transcription_id}.json"

    def _scan_max_id(self) -> int:
        ids = [int(p.stem) for p in self.transcriptions_dir.glob("*.json") if p.stem.isdigit()]
        return max(ids, default=0)

    def create(self, transcription: NewTranscription) -> int:
        """Persist a new transcription.

        Args:
            transcription: Write shape of the transcription

        Returns:
            Id of the stored record
        """
        now = int(time.time())
        with self._lock:
            transcription_id = self._next_id
            record = TranscriptionRecord(
                id=transcription_id,
                text=transcription.text,
                timestamp=now,
                created_at=now,
                updated_at=now,
                language=transcription.language,
                audio_file=transcription.audio_file,
                duration=transcription.duration,
                speech_model=transcription.speech_model,
                formatting_model=transcription.formatting_model,
                meta=transcription.meta,
            )
            try:
                with open(self._record_path(transcription_id), 'w', encoding='utf-8') as f:
                    json.dump(record.to_dict(), f, indent=2, ensure_ascii=False)
            except (OSError, TypeError) as e:
                logger.error(f"Error saving transcription {transcription_id}: {e}")
                raise StorageFailure(f"Failed to save transcription: {e}") from e
            self._next_id += 1

        logger.info(f"Transcription saved: {transcription_id} ({len(record.text)} chars)")
        return transcription_id

    def _load(self, path: Path) -> TranscriptionRecord:
        with open(path, 'r', encoding='utf-8') as f:
            return TranscriptionRecord.from_dict(json.load(f))

    def list(self, limit: int = 50, offset: int = 0) -> List[TranscriptionRecord]:
        """List transcriptions newest first.

        Args:
            limit: Maximum number of records
            offset: Number of newest records to skip

        Returns:
            Page of transcription records

        Raises:
            ValueError: If limit or offset is negative
        """
        if limit < 0 or offset < 0:
            raise ValueError(f"limit and offset must be non-negative (limit={limit}, offset={offset})")
        with self._lock:
            try:
                records = [self._load(p) for p in self.transcriptions_dir.glob("*.json")]
            except (OSError, ValueError, TypeError) as e:
                raise StorageFailure(f"Failed to list transcriptions: {e}") from e

        records.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return records[offset:offset + limit]

    def get(self, transcription_id: int) -> Optional[TranscriptionRecord]:
        path = self._record_path(transcription_id)
        with self._lock:
            if not path.exists():
                return None
            try:
                return self._load(path)
            except (OSError, ValueError, TypeError) as e:
                raise StorageFailure(f"Failed to load transcription {transcription_id}: {e}") from e

    def delete(self, transcription_id: int) -> None:
        with self._lock:
            try:
                self._record_path(transcription_id).unlink(missing_ok=True)
            except OSError as e:
                raise StorageFailure(f"Failed to delete transcription {transcription_id}: {e}") from e
        logger.info(f"Deleted transcription: {transcription_id}")

    def delete_all(self) -> None:
        with self._lock:
            try:
                paths = list(self.transcriptions_dir.glob("*.json"))
                for path in paths:
                    path.unlink()
            except OSError as e:
                raise StorageFailure(f"Failed to delete transcriptions: {e}") from e
        logger.info(f"Deleted {len(paths)} transcriptions")
