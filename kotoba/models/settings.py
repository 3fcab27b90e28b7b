"""Settings models: the live settings document and its per-finalize snapshot."""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel


class FormatterSettings(BaseModel):
    enabled: bool = False
    model_id: Optional[str] = None


class DictationSettings(BaseModel):
    auto_detect_enabled: bool = True
    selected_language: str = "en"


class OllamaSettings(BaseModel):
    url: str


class ModelProvidersSettings(BaseModel):
    ollama: Optional[OllamaSettings] = None
    default_speech_model: Optional[str] = None


class UiSettings(BaseModel):
    """Display preferences. Stored and returned with the settings, never read by the pipeline."""
    theme: str = "system"
    locale: Optional[str] = None


class AppSettings(BaseModel):
    """User configuration consulted by the dictation pipeline."""
    formatter: Optional[FormatterSettings] = None
    dictation: Optional[DictationSettings] = None
    model_providers: Optional[ModelProvidersSettings] = None
    ui: Optional[UiSettings] = None


@dataclass(frozen=True)
class SettingsSnapshot:
    """Immutable view of the settings one finalize call works with."""
    language: Optional[str]
    formatting_enabled: bool
    formatting_model_id: Optional[str]
    formatting_endpoint: Optional[str]
    speech_model: Optional[str]
    fallback_language: str = "en"

    @property
    def persisted_language(self) -> str:
        return self.language or self.fallback_language

    def formatting_configured(self) -> bool:
        return bool(self.formatting_enabled and self.formatting_model_id and self.formatting_endpoint)
