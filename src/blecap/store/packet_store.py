"""Append-only packet collection indexed by advertiser address."""

from __future__ import annotations

import threading
from collections import defaultdict
from typing import DefaultDict, Iterable, List

import pandas as pd

from ..core.models import Packet, format_address, normalize_address
from ..logging import get_logger

logger = get_logger(__name__)


class PacketStore:
    """Canonical packet sequence of a capture session.

    Writers append whole batches under a lock so readers, which copy under
    the same lock, always observe a prefix of complete batches.
    """

    def __init__(self) -> None:
        self._packets: List[Packet] = []
        self._by_address: DefaultDict[bytes, List[int]] = defaultdict(list)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._packets)

    def append(self, packet: Packet) -> None:
        """Append a single packet and index it by advertiser address."""
        with self._lock:
            self._append_locked(packet)

    def extend(self, packets: Iterable[Packet]) -> int:
        """Append ``packets`` atomically and return how many were added."""
        with self._lock:
            count = 0
            for packet in packets:
                self._append_locked(packet)
                count += 1
            return count

    def _append_locked(self, packet: Packet) -> None:
        if self._packets and packet.timestamp < self._packets[-1].timestamp:
            logger.debug(
                "Packet from %s at %.6f precedes last stored timestamp %.6f",
                packet.address,
                packet.timestamp,
                self._packets[-1].timestamp,
            )
        self._by_address[packet.advertiser_address].append(len(self._packets))
        self._packets.append(packet)

    def by_device(self, address: bytes | str) -> List[Packet]:
        """Return packets for ``address`` in capture order; empty if unseen."""
        key = normalize_address(address)
        with self._lock:
            positions = self._by_address.get(key)
            if not positions:
                return []
            return [self._packets[i] for i in positions]

    def all(self) -> List[Packet]:
        with self._lock:
            return list(self._packets)

    def addresses(self) -> List[bytes]:
        """Return known advertiser addresses in first-seen order."""
        with self._lock:
            return list(self._by_address.keys())

    def clear(self) -> None:
        with self._lock:
            self._packets.clear()
            self._by_address.clear()

    def to_dataframe(self) -> pd.DataFrame:
        """Return stored packets as a DataFrame, one row per packet."""
        columns = [
            "timestamp",
            "address",
            "rssi",
            "pdu_type",
            "pdu_type_name",
            "pdu_length",
            "payload_length",
            "payload",
        ]
        packets = self.all()
        if not packets:
            return pd.DataFrame(columns=columns)
        rows = [
            {
                "timestamp": p.timestamp,
                "address": format_address(p.advertiser_address),
                "rssi": p.rssi,
                "pdu_type": p.pdu_type,
                "pdu_type_name": p.pdu_type_name,
                "pdu_length": p.pdu_length,
                "payload_length": len(p.payload),
                "payload": p.payload.hex(),
            }
            for p in packets
        ]
        return pd.DataFrame(rows, columns=columns)


__all__ = ["PacketStore"]
