"""Exception hierarchy for the dictation core."""


class KotobaError(Exception):
    """Base class for every error raised by the dictation core."""


class SessionStateError(KotobaError):
    """A requested transition is not allowed from the current state."""


class AlreadyActive(SessionStateError):
    """A recording session is already live."""


class NotActive(SessionStateError):
    """No session in the state required by the operation."""


class SessionCancelled(SessionStateError):
    """The session was cancelled while its pipeline was running."""


class StateLockError(KotobaError):
    """The session store guard could not be acquired."""


class SpeechEngineError(KotobaError):
    """Speech engine failed to produce a transcript."""


class SpeechEngineUnavailable(SpeechEngineError):
    pass


class InvalidAudio(SpeechEngineError):
    pass


class InferenceFailed(SpeechEngineError):
    pass


class FormattingError(KotobaError):
    """Formatting service failed. Never surfaced by the orchestrator."""


class ServiceUnreachable(FormattingError):
    pass


class InvalidResponse(FormattingError):
    pass


class StorageFailure(KotobaError):
    """Persistence gateway could not complete the operation."""
