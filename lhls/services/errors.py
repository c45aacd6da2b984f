"""Exceptions raised by the live-window simulation."""


class LHLSError(Exception):
    """Base class for all simulation errors."""


class PlaylistError(LHLSError):
    """The playlist could not be read, parsed or is of the wrong type."""


class SegmentNotFoundError(LHLSError):
    """A requested segment is unknown or its backing file is missing."""

    def __init__(self, uri: str, reason: str = "unknown segment"):
        super().__init__(f"{uri}: {reason}")
        self.uri = uri
        self.reason = reason


class EmptyWindowError(LHLSError):
    """No segment qualified for the live window."""


class ManifestEncodingError(LHLSError):
    """The windowed manifest could not be encoded."""
