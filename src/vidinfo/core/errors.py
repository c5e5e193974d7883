"""Exceptions raised while extracting video info."""

from typing import Optional


class ExtractionError(Exception):
    """Base class for every fatal extraction failure."""


class IdentifierMissing(ExtractionError):
    """The input did not contain a recognizable video id."""


class TransportError(ExtractionError):
    """An HTTP request failed, returned a non-2xx status, or was cancelled."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigUnavailable(ExtractionError):
    """Neither the embedded config nor the video info endpoint produced a config."""


class VideoUnavailable(ExtractionError):
    """The provider reports the video as unplayable (private, removed, blocked)."""

    def __init__(self, reason: str, code: str = ""):
        self.code = code
        self.reason = reason
        if code:
            super().__init__(f"Error {code}: {reason}")
        else:
            super().__init__(f"Unavailable because: {reason}")


class MalformedResponse(ExtractionError):
    """A structured payload was present but could not be decoded."""


class DownloadUrlUnavailable(ExtractionError):
    """No playable URL could be resolved for a format."""
