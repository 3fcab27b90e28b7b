"""Resolution of the per-finalize settings snapshot."""

from typing import Optional

from ..models.settings import AppSettings, SettingsSnapshot


def resolve_settings_snapshot(settings: AppSettings,
                              fallback_language: str = "en",
                              default_speech_model: Optional[str] = None) -> SettingsSnapshot:
    """Capture the settings a finalize call needs.

    Pure: reads ``settings`` and never mutates it.

    Args:
        settings: Live settings document
        fallback_language: Locale persisted when no language is resolved
        default_speech_model: Speech engine identifier used when the settings
            do not name one

    Returns:
        Frozen snapshot
    """
    dictation = settings.dictation
    # Auto-detect leaves the language unset so the speech engine infers it
    if dictation is None or dictation.auto_detect_enabled:
        language = None
    else:
        language = dictation.selected_language or None

    formatter = settings.formatter
    providers = settings.model_providers

    endpoint = None
    speech_model = default_speech_model
    if providers is not None:
        if providers.ollama is not None and providers.ollama.url:
            endpoint = providers.ollama.url
        if providers.default_speech_model:
            speech_model = providers.default_speech_model

    return SettingsSnapshot(
        language=language,
        formatting_enabled=bool(formatter and formatter.enabled),
        formatting_model_id=formatter.model_id if formatter else None,
        formatting_endpoint=endpoint,
        speech_model=speech_model,
        fallback_language=fallback_language,
    )
