from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict


class PacketDict(TypedDict):
    """JSON-friendly representation of a packet."""

    timestamp: float
    address: str
    rssi: int
    pdu_type: int
    pdu_type_name: str
    pdu_length: int
    access_address: str
    preamble: int
    payload: str
    crc: str


class AnomalyDict(TypedDict):
    address: str
    window_start: float
    observed_count: int
    expected_count: float


class SecurityReportDict(TypedDict):
    uses_secure_connections: bool
    potential_mitm_vulnerability: bool
    pairing_method: str
    pairing_packets: int


class PipelineCounters(TypedDict):
    """Bookkeeping counters maintained by the ingestion pipeline."""

    received_frames: int
    processed_frames: int
    dropped_frames: int
    malformed_frames: int
    rejected_frames: int
    batches: int
    last_error: Optional[str]


class ExportSnapshot(TypedDict, total=False):
    """Typed representation of an exported capture session."""

    packets: List[PacketDict]
    statistics: Dict[str, Any]
    pipeline: PipelineCounters
    anomalies: List[AnomalyDict]
    security: SecurityReportDict
    devices: List[Dict[str, Any]]
    time_window: Optional[float]

