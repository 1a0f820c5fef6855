"""Custom exceptions for the :mod:`blecap` package."""


class BleCaptureError(Exception):
    """Base class for all custom ``blecap`` exceptions.

    Parameters
    ----------
    message:
        Short description of the failure.
    context:
        Optional additional information about where/why the error occurred.
    suggestion:
        Optional hint that may help recover from the error.
    """

    def __init__(
        self,
        message: str = "",
        *,
        context: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message)
        self.context = context
        self.suggestion = suggestion


class ParseError(BleCaptureError):
    """Raised when a raw frame cannot be decoded into a packet."""


class FrameTooShortError(ParseError):
    """Raised when a raw frame is below the minimum frame length."""


class MalformedFrameError(ParseError):
    """Raised when a raw frame is structurally inconsistent."""


class AnalysisError(BleCaptureError):
    """Raised when an analysis step fails."""


class PipelineError(BleCaptureError):
    """Raised when the ingestion pipeline is driven through an invalid state."""


class ExportError(BleCaptureError):
    """Raised when a capture snapshot cannot be exported."""


class SignatureTableError(BleCaptureError):
    """Raised when a protocol signature table cannot be loaded or is invalid."""
