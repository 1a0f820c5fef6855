from .config import Settings, get_settings, settings
from .constants import *  # noqa: F401,F403
from .models import (
    Anomaly,
    Packet,
    PacketStatistics,
    PairingMethod,
    RawFrame,
    SecurityReport,
    format_address,
    normalize_address,
)
from .types import AnomalyDict, ExportSnapshot, PacketDict, PipelineCounters
from ..exceptions import (
    BleCaptureError,
    ParseError,
    FrameTooShortError,
    MalformedFrameError,
    AnalysisError,
    PipelineError,
    ExportError,
    SignatureTableError,
)

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "RawFrame",
    "Packet",
    "PacketStatistics",
    "Anomaly",
    "PairingMethod",
    "SecurityReport",
    "format_address",
    "normalize_address",
    "PacketDict",
    "AnomalyDict",
    "PipelineCounters",
    "ExportSnapshot",
    "BleCaptureError",
    "ParseError",
    "FrameTooShortError",
    "MalformedFrameError",
    "AnalysisError",
    "PipelineError",
    "ExportError",
    "SignatureTableError",
] + [name for name in globals().keys() if name.isupper()]
