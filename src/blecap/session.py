"""Capture session facade tying the analysis components together."""

from __future__ import annotations

import json
from typing import Any, FrozenSet, List, Optional

import pandas as pd

from .analysis.anomaly_detector import AnomalyDetector
from .analysis.security_analyzer import SecurityAnalyzer
from .core.config import Settings, get_settings
from .core.models import Anomaly, Packet, PacketStatistics, RawFrame, SecurityReport
from .core.types import ExportSnapshot, PipelineCounters
from .exceptions import ExportError
from .flows.flow_models import DeviceFlow, FlowReconstructor
from .heuristics.protocol_identifier import ProtocolIdentifier
from .logging import get_logger
from .metrics.statistics_aggregator import StatisticsAggregator
from .pipeline.ingestion import IngestionPipeline
from .store.packet_store import PacketStore

logger = get_logger(__name__)

EXPORT_FORMATS = ("dict", "json", "dataframe")


class CaptureSession:
    """Own the packet store of one capture and expose its query operations.

    Frames go in through :meth:`ingest`; every query reads the shared
    :class:`PacketStore` or the aggregator snapshot.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        identifier: Optional[ProtocolIdentifier] = None,
        capacity: Optional[int] = None,
        flush_threshold: Optional[int] = None,
        flush_interval: Optional[float] = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.identifier = identifier if identifier is not None else ProtocolIdentifier()
        self.store = PacketStore()
        self.aggregator = StatisticsAggregator(self.identifier)
        self.flows = FlowReconstructor(self.store, self.identifier)
        self.anomaly_detector = AnomalyDetector(
            self.settings.anomaly_time_window, self.settings.deviation_threshold
        )
        self.security_analyzer = SecurityAnalyzer()
        self.pipeline = IngestionPipeline(
            self.store,
            self.aggregator,
            capacity=capacity if capacity is not None else self.settings.buffer_capacity,
            flush_threshold=(
                flush_threshold if flush_threshold is not None else self.settings.flush_threshold
            ),
            flush_interval=(
                flush_interval if flush_interval is not None else self.settings.flush_interval
            ),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> "CaptureSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self) -> None:
        self.pipeline.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self.pipeline.stop(timeout)

    def flush(self) -> int:
        return self.pipeline.flush()

    def reset(self) -> None:
        """Start a new session: forget buffered frames, packets, statistics and counters."""
        with self.pipeline.batch_barrier():
            self.pipeline.discard_pending()
            self.store.clear()
            self.aggregator.reset()
            self.pipeline.reset_counters()
        logger.info("Capture session reset")

    # ------------------------------------------------------------------
    # Outbound contract
    # ------------------------------------------------------------------

    def ingest(self, frame: RawFrame) -> bool:
        return self.pipeline.ingest(frame)

    def snapshot_statistics(self) -> PacketStatistics:
        return self.aggregator.snapshot()

    def pipeline_counters(self) -> PipelineCounters:
        return self.pipeline.counters()

    def flow(self, address: bytes | str) -> List[Packet]:
        return self.flows.flow(address)

    def device_summaries(self) -> List[DeviceFlow]:
        return self.flows.summaries()

    def classify(self, packet: Packet) -> FrozenSet[str]:
        return self.identifier.classify(packet)

    def detect_anomalies(
        self,
        time_window: Optional[float] = None,
        deviation_threshold: Optional[float] = None,
        packets: Optional[List[Packet]] = None,
    ) -> List[Anomaly]:
        source = packets if packets is not None else self.store.all()
        return self.anomaly_detector.detect_anomalies(source, time_window, deviation_threshold)

    def security_report(self) -> SecurityReport:
        return self.security_analyzer.analyze(self.store.all())

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def snapshot(self, time_window: Optional[float] = None) -> ExportSnapshot:
        """Return a JSON-friendly snapshot of the whole session."""
        with self.pipeline.batch_barrier():
            packets = self.store.all()
            statistics = self.aggregator.snapshot()
            counters = self.pipeline.counters()
            devices = [flow.to_dict() for flow in self.flows.summaries()]
        window = time_window if time_window is not None else self.anomaly_detector.time_window
        anomalies = self.anomaly_detector.detect_anomalies(packets, window)
        report = self.security_analyzer.analyze(packets)
        return ExportSnapshot(
            packets=[p.to_dict() for p in packets],
            statistics=statistics.to_dict(),
            pipeline=counters,
            anomalies=[a.to_dict() for a in anomalies],
            security=report.to_dict(),
            devices=devices,
            time_window=window,
        )

    def export(self, fmt: str = "dict", time_window: Optional[float] = None) -> Any:
        """Return the session snapshot as a dict, JSON string or DataFrame.

        The ``dataframe`` format yields the packet table only.
        """
        fmt = fmt.lower()
        if fmt not in EXPORT_FORMATS:
            raise ExportError(
                f"Unsupported export format: '{fmt}'",
                suggestion=f"Use one of: {', '.join(EXPORT_FORMATS)}",
            )
        if fmt == "dataframe":
            with self.pipeline.batch_barrier():
                return self.store.to_dataframe()
        snapshot = self.snapshot(time_window)
        if fmt == "json":
            try:
                return json.dumps(snapshot, indent=2)
            except (TypeError, ValueError) as exc:
                raise ExportError(f"Snapshot is not JSON serializable: {exc}") from exc
        return snapshot


def export_devices_dataframe(session: CaptureSession) -> pd.DataFrame:
    """Return one row per device with its flow summary."""
    rows = [flow.to_dict() for flow in session.device_summaries()]
    return pd.DataFrame(rows)


__all__ = ["CaptureSession", "EXPORT_FORMATS", "export_devices_dataframe"]
