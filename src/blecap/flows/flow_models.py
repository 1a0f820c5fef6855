from __future__ import annotations

"""Per-device flow reconstruction.

A device flow is the capture-ordered subsequence of packets sharing an
advertiser address. Flows are derived from the :class:`PacketStore` on
demand and have no lifecycle of their own.
"""

from dataclasses import dataclass, field
from statistics import mean
from typing import FrozenSet, List, Optional

from ..core.constants import TAG_UNKNOWN
from ..core.models import Packet, format_address
from ..heuristics.protocol_identifier import ProtocolIdentifier
from ..parsers.ad_structures import decode_advertising_data
from ..store.packet_store import PacketStore


@dataclass
class DeviceFlow:
    """Summary of the packets observed from a single advertiser."""

    address: str
    packets: List[Packet] = field(default_factory=list)
    first_seen: float = 0.0
    last_seen: float = 0.0
    rssi_min: Optional[int] = None
    rssi_max: Optional[int] = None
    rssi_mean: Optional[float] = None
    local_name: str = ""
    protocols: FrozenSet[str] = frozenset()

    @property
    def packet_count(self) -> int:
        return len(self.packets)

    @property
    def duration(self) -> float:
        return self.last_seen - self.first_seen

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_packets(
        cls, packets: List[Packet], identifier: Optional[ProtocolIdentifier] = None
    ) -> "DeviceFlow":
        """Create a :class:`DeviceFlow` from one device's packets.

        ``packets`` keep their given (capture) order.
        """

        if not packets:
            raise ValueError("packets required")

        addresses = {p.advertiser_address for p in packets}
        if len(addresses) != 1:
            raise ValueError("packets must share a single advertiser address")

        rssi_values = [p.rssi for p in packets]
        local_name = ""
        for pkt in reversed(packets):
            local_name = decode_advertising_data(pkt.payload).local_name
            if local_name:
                break

        protocols: FrozenSet[str] = frozenset()
        if identifier is not None:
            tags = set()
            for pkt in packets:
                tags |= identifier.classify(pkt)
            if len(tags) > 1:
                tags.discard(TAG_UNKNOWN)
            protocols = frozenset(tags)

        return cls(
            address=format_address(packets[0].advertiser_address),
            packets=list(packets),
            first_seen=min(p.timestamp for p in packets),
            last_seen=max(p.timestamp for p in packets),
            rssi_min=min(rssi_values),
            rssi_max=max(rssi_values),
            rssi_mean=mean(rssi_values),
            local_name=local_name,
            protocols=protocols,
        )

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "packet_count": self.packet_count,
            "first_seen": self.first_seen,
            "last_seen": self.last_seen,
            "duration": self.duration,
            "rssi_min": self.rssi_min,
            "rssi_max": self.rssi_max,
            "rssi_mean": self.rssi_mean,
            "local_name": self.local_name,
            "protocols": sorted(self.protocols),
        }


class FlowReconstructor:
    """Thin query layer over :class:`PacketStore` for per-device flows."""

    def __init__(self, store: PacketStore, identifier: Optional[ProtocolIdentifier] = None) -> None:
        self.store = store
        self.identifier = identifier

    def flow(self, address: bytes | str) -> List[Packet]:
        return self.store.by_device(address)

    def devices(self) -> List[str]:
        return [format_address(a) for a in self.store.addresses()]

    def summary(self, address: bytes | str) -> Optional[DeviceFlow]:
        packets = self.flow(address)
        if not packets:
            return None
        return DeviceFlow.from_packets(packets, self.identifier)

    def summaries(self) -> List[DeviceFlow]:
        flows: List[DeviceFlow] = []
        for address in self.store.addresses():
            packets = self.store.by_device(address)
            if packets:
                flows.append(DeviceFlow.from_packets(packets, self.identifier))
        return flows


__all__ = ["DeviceFlow", "FlowReconstructor"]
