"""Unit tests for settings snapshot resolution."""

import dataclasses

import pytest

from kotoba.models import (
    AppSettings,
    DictationSettings,
    FormatterSettings,
    ModelProvidersSettings,
    OllamaSettings,
)
from kotoba.services import resolve_settings_snapshot


@pytest.mark.unit
class TestResolveSettingsSnapshot:

    def test_defaults(self):
        snapshot = resolve_settings_snapshot(AppSettings(), fallback_language="ja", default_speech_model="engine")

        assert snapshot.language is None
        assert snapshot.persisted_language == "ja"
        assert snapshot.formatting_enabled is False
        assert snapshot.formatting_model_id is None
        assert snapshot.formatting_endpoint is None
        assert snapshot.speech_model == "engine"
        assert not snapshot.formatting_configured()

    def test_auto_detect_leaves_language_unset(self):
        settings = AppSettings(dictation=DictationSettings(auto_detect_enabled=True, selected_language="de"))

        assert resolve_settings_snapshot(settings).language is None

    def test_selected_language_used_without_auto_detect(self):
        settings = AppSettings(dictation=DictationSettings(auto_detect_enabled=False, selected_language="de"))

        snapshot = resolve_settings_snapshot(settings)
        assert snapshot.language == "de"
        assert snapshot.persisted_language == "de"

    def test_formatting_fields(self):
        settings = AppSettings(
            formatter=FormatterSettings(enabled=True, model_id="llama3"),
            model_providers=ModelProvidersSettings(
                ollama=OllamaSettings(url="http://ollama:11434"),
                default_speech_model="whisper-local",
            ),
        )

        snapshot = resolve_settings_snapshot(settings, default_speech_model="engine")
        assert snapshot.formatting_enabled is True
        assert snapshot.formatting_model_id == "llama3"
        assert snapshot.formatting_endpoint == "http://ollama:11434"
        assert snapshot.speech_model == "whisper-local"
        assert snapshot.formatting_configured()

    def test_settings_not_mutated(self):
        settings = AppSettings(dictation=DictationSettings(auto_detect_enabled=False, selected_language="fr"))
        before = settings.model_dump()

        resolve_settings_snapshot(settings)

        assert settings.model_dump() == before

    def test_snapshot_is_frozen(self):
        snapshot = resolve_settings_snapshot(AppSettings())

        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.language = "en"
