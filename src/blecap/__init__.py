# src/blecap/__init__.py
from .core.models import (
    Anomaly,
    Packet,
    PacketStatistics,
    PairingMethod,
    RawFrame,
    SecurityReport,
)
from .parsers import parse, parse_frame, decode_advertising_data
from .store import PacketStore
from .metrics import StatisticsAggregator
from .flows import DeviceFlow, FlowReconstructor
from .heuristics import ProtocolIdentifier
from .analysis import AnomalyDetector, SecurityAnalyzer
from .pipeline import IngestionPipeline, BaseFrameSource, IterableFrameSource, pump
from .session import CaptureSession


__all__ = [
    "RawFrame",
    "Packet",
    "PacketStatistics",
    "Anomaly",
    "PairingMethod",
    "SecurityReport",
    "parse",
    "parse_frame",
    "decode_advertising_data",
    "PacketStore",
    "StatisticsAggregator",
    "DeviceFlow",
    "FlowReconstructor",
    "ProtocolIdentifier",
    "AnomalyDetector",
    "SecurityAnalyzer",
    "IngestionPipeline",
    "BaseFrameSource",
    "IterableFrameSource",
    "pump",
    "CaptureSession",
]
