"""Pytest configuration and fixtures for Kotoba tests."""

import uuid
import logging
import tempfile
from pathlib import Path
from typing import Callable, List, Optional

import numpy as np
import pytest
from pubsub import pub
from scipy.io import wavfile

from kotoba.models import (
    AppSettings,
    FormatterSettings,
    ModelProvidersSettings,
    OllamaSettings,
    RecordingStateUpdate,
    TranscriptionCompleted,
)
from kotoba.services import LifecyclePublisher, SessionOrchestrator, SessionStore
from kotoba.storage import TranscriptionStore
from kotoba.transcription.base import AbstractSpeechEngine


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without external services")


class FakeSpeechEngine(AbstractSpeechEngine):
    """Speech engine returning fixed text or raising a fixed error."""

    name = "fake-engine"

    def __init__(self, text: str = "hello world", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: List[tuple] = []
        # Runs inside transcribe, i.e. while the pipeline is mid-flight
        self.on_transcribe: Optional[Callable[[], None]] = None

    def transcribe(self, audio_reference: str, language: Optional[str] = None) -> str:
        self.calls.append((audio_reference, language))
        if self.on_transcribe:
            self.on_transcribe()
        if self.error:
            raise self.error
        return self.text


class FakeFormatter:
    """Formatting engine returning upper-cased text or raising a fixed error."""

    def __init__(self, error: Optional[Exception] = None, result: Optional[str] = None):
        self.error = error
        self.result = result
        self.calls: List[tuple] = []

    def format(self, endpoint: str, model_id: str, text: str) -> str:
        self.calls.append((endpoint, model_id, text))
        if self.error:
            raise self.error
        return self.result if self.result is not None else text.upper()


class EventRecorder:
    """Collects lifecycle events published on a publisher's topics."""

    def __init__(self, publisher: LifecyclePublisher):
        self.states: List[RecordingStateUpdate] = []
        self.completions: List[TranscriptionCompleted] = []
        pub.subscribe(self.on_state, publisher.state_topic)
        pub.subscribe(self.on_completion, publisher.completion_topic)

    def on_state(self, update):
        self.states.append(update)

    def on_completion(self, event):
        self.completions.append(event)


FORMATTING_SETTINGS = AppSettings(
    formatter=FormatterSettings(enabled=True, model_id="llama3"),
    model_providers=ModelProvidersSettings(ollama=OllamaSettings(url="http://localhost:11434")),
)


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def sample_audio_file(temp_data_dir):
    """Create a one second 16-bit mono WAV file."""
    file_path = Path(temp_data_dir) / "a.wav"
    t = np.linspace(0, 1.0, 16000, False)
    wavfile.write(str(file_path), 16000, (np.sin(2 * np.pi * 440 * t) * 32767).astype(np.int16))
    return str(file_path)


@pytest.fixture
def publisher():
    """Publisher on topics unique to the test."""
    prefix = f"t_{uuid.uuid4().hex}"
    return LifecyclePublisher(state_topic=f"{prefix}.state", completion_topic=f"{prefix}.completed")


@pytest.fixture
def events(publisher):
    return EventRecorder(publisher)


@pytest.fixture
def speech_engine():
    return FakeSpeechEngine()


@pytest.fixture
def formatter():
    return FakeFormatter()


@pytest.fixture
def gateway(temp_data_dir):
    return TranscriptionStore(temp_data_dir)


@pytest.fixture
def store():
    return SessionStore(lock_timeout=0.5)


@pytest.fixture
def orchestrator(store, speech_engine, gateway, formatter, publisher):
    return SessionOrchestrator(
        store=store,
        speech_engine=speech_engine,
        gateway=gateway,
        formatter=formatter,
        publisher=publisher,
        fallback_language="en",
    )
