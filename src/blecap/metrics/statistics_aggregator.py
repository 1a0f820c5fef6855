"""Incremental statistics over delivered packet batches."""

from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..core.models import Packet, PacketStatistics, rssi_bucket
from ..heuristics.protocol_identifier import ProtocolIdentifier
from ..parsers.ad_structures import decode_advertising_data


class StatisticsAggregator:
    """Accumulate session-wide :class:`PacketStatistics` from packet batches.

    Counters only grow until :meth:`reset` starts a new session.
    """

    def __init__(self, identifier: Optional[ProtocolIdentifier] = None) -> None:
        self.identifier = identifier if identifier is not None else ProtocolIdentifier()
        self._stats = PacketStatistics()
        self._lock = threading.Lock()

    def ingest(self, batch: Sequence[Packet]) -> None:
        """Fold one delivered batch into the running statistics."""
        # signature matching happens outside the lock; it is pure
        signatures = [self.identifier.matched_signatures(p.payload) for p in batch]
        manufacturers = [
            list(decode_advertising_data(p.payload).manufacturer_data) for p in batch
        ]
        with self._lock:
            stats = self._stats
            stats.total_packets += len(batch)
            for packet, sigs, companies in zip(batch, signatures, manufacturers):
                stats.rssi_sum += packet.rssi
                stats.rssi_count += 1
                stats.rssi_histogram[rssi_bucket(packet.rssi)] += 1
                stats.unique_addresses.add(packet.advertiser_address)
                stats.pdu_type_counts[packet.pdu_type] += 1
                for sig in sigs:
                    stats.signature_counts[sig] += 1
                for company_id in companies:
                    stats.manufacturer_counts[company_id] += 1
                if stats.first_timestamp is None or packet.timestamp < stats.first_timestamp:
                    stats.first_timestamp = packet.timestamp
                if stats.last_timestamp is None or packet.timestamp > stats.last_timestamp:
                    stats.last_timestamp = packet.timestamp

    def snapshot(self) -> PacketStatistics:
        """Return a consistent point-in-time copy of the statistics."""
        with self._lock:
            return self._stats.copy()

    def reset(self) -> None:
        with self._lock:
            self._stats = PacketStatistics()


__all__ = ["StatisticsAggregator"]
