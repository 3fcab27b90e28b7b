"""Unit tests for TranscriptionStore class."""

from pathlib import Path
from unittest.mock import patch

import pytest

from kotoba.errors import StorageFailure
from kotoba.models import NewTranscription
from kotoba.storage import TranscriptionStore


@pytest.mark.unit
class TestTranscriptionStore:
    """Test cases for TranscriptionStore class."""

    def test_initialization(self, temp_data_dir):
        store = TranscriptionStore(temp_data_dir)

        assert store.transcriptions_dir == Path(temp_data_dir) / "transcriptions"
        assert store.transcriptions_dir.is_dir()

    def test_create_and_get(self, temp_data_dir):
        store = TranscriptionStore(temp_data_dir)

        transcription_id = store.create(NewTranscription(
            text="hello world",
            language="en",
            audio_file="/tmp/a.wav",
            speech_model="google-speech",
            meta={"sessionId": "s1", "source": "microphone"},
        ))

        record = store.get(transcription_id)
        assert record.id == transcription_id
        assert record.text == "hello world"
        assert record.language == "en"
        assert record.audio_file == "/tmp/a.wav"
        assert record.speech_model == "google-speech"
        assert record.formatting_model is None
        assert record.confidence is None
        assert record.meta == {"sessionId": "s1", "source": "microphone"}
        assert record.created_at == record.updated_at == record.timestamp

    def test_get_missing_returns_none(self, temp_data_dir):
        assert TranscriptionStore(temp_data_dir).get(42) is None

    def test_list_newest_first_with_pagination(self, temp_data_dir):
        store = TranscriptionStore(temp_data_dir)
        with patch("kotoba.storage.transcription_store.time.time", side_effect=[100, 300, 200]):
            first = store.create(NewTranscription(text="first"))
            second = store.create(NewTranscription(text="second"))
            third = store.create(NewTranscription(text="third"))

        assert [r.id for r in store.list()] == [second, third, first]
        assert [r.text for r in store.list(limit=1)] == ["second"]
        assert [r.text for r in store.list(limit=2, offset=1)] == ["third", "first"]
        assert store.list(offset=5) == []

    @pytest.mark.parametrize("kwargs", [{"limit": -1}, {"offset": -1}])
    def test_list_rejects_negative_paging(self, temp_data_dir, kwargs):
        store = TranscriptionStore(temp_data_dir)
        for text in ("a", "b", "c"):
            store.create(NewTranscription(text=text))

        with pytest.raises(ValueError):
            store.list(**kwargs)

    def test_same_second_ordered_by_id(self, temp_data_dir):
        store = TranscriptionStore(temp_data_dir)
        with patch("kotoba.storage.transcription_store.time.time", return_value=100):
            ids = [store.create(NewTranscription(text=str(i))) for i in range(3)]

        assert [r.id for r in store.list()] == list(reversed(ids))

    def test_ids_continue_across_instances(self, temp_data_dir):
        first = TranscriptionStore(temp_data_dir).create(NewTranscription(text="a"))
        second = TranscriptionStore(temp_data_dir).create(NewTranscription(text="b"))

        assert second == first + 1

    def test_delete(self, temp_data_dir):
        store = TranscriptionStore(temp_data_dir)
        keep = store.create(NewTranscription(text="keep"))
        drop = store.create(NewTranscription(text="drop"))

        store.delete(drop)
        store.delete(999)

        assert store.get(drop) is None
        assert [r.id for r in store.list()] == [keep]

    def test_delete_all(self, temp_data_dir):
        store = TranscriptionStore(temp_data_dir)
        for text in ("a", "b", "c"):
            store.create(NewTranscription(text=text))

        store.delete_all()

        assert store.list() == []

    def test_write_failure_raises_storage_failure(self, temp_data_dir):
        store = TranscriptionStore(temp_data_dir)

        with patch("builtins.open", side_effect=OSError("disk full")):
            with pytest.raises(StorageFailure):
                store.create(NewTranscription(text="lost"))

        # The failed id is not consumed
        assert store.create(NewTranscription(text="saved")) == 1

    def test_corrupt_record_raises_storage_failure(self, temp_data_dir):
        store = TranscriptionStore(temp_data_dir)
        (store.transcriptions_dir / "7.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageFailure):
            store.get(7)
        with pytest.raises(StorageFailure):
            store.list()
