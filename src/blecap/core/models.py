"""Core data structures for raw frames, parsed packets and analysis results."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Set

from .constants import (
    ADVERTISING_ACCESS_ADDRESS,
    PDU_TYPE_NAMES,
    RSSI_HISTOGRAM_BUCKET_DBM,
)


def format_address(address: bytes) -> str:
    """Return the printable form of a wire-order advertiser address."""
    return ":".join(f"{b:02X}" for b in reversed(address))


def normalize_address(address: bytes | str) -> bytes:
    """Return the wire-order bytes for ``address``.

    ``address`` may be raw wire-order bytes or the printable
    ``"AA:BB:CC:DD:EE:FF"`` form returned by :func:`format_address`.
    """
    if isinstance(address, (bytes, bytearray)):
        return bytes(address)
    cleaned = address.replace(":", "").replace("-", "").strip()
    try:
        return bytes.fromhex(cleaned)[::-1]
    except ValueError:
        return b""


@dataclass(frozen=True)
class RawFrame:
    """A captured link-layer buffer as delivered by a frame source."""

    data: bytes
    timestamp: float
    rssi: int
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class Packet:
    """A decoded advertising packet."""

    preamble: int
    access_address: int
    pdu_type: int
    pdu_length: int
    advertiser_address: bytes
    payload: bytes
    crc: int
    timestamp: float = 0.0
    rssi: int = 0

    @property
    def address(self) -> str:
        return format_address(self.advertiser_address)

    @property
    def pdu_type_name(self) -> str:
        return PDU_TYPE_NAMES.get(self.pdu_type, f"PDU_0x{self.pdu_type:X}")

    @property
    def is_advertising_channel(self) -> bool:
        return self.access_address == ADVERTISING_ACCESS_ADDRESS

    def to_bytes(self) -> bytes:
        """Re-encode the packet using the advertising frame layout."""
        header = (self.pdu_length & 0x0F) << 4 | (self.pdu_type & 0x0F)
        return (
            bytes([self.preamble & 0xFF])
            + self.access_address.to_bytes(4, "little")
            + bytes([header])
            + self.advertiser_address
            + self.payload
            + self.crc.to_bytes(3, "little")
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "address": self.address,
            "rssi": self.rssi,
            "pdu_type": self.pdu_type,
            "pdu_type_name": self.pdu_type_name,
            "pdu_length": self.pdu_length,
            "access_address": f"0x{self.access_address:08X}",
            "preamble": self.preamble,
            "payload": self.payload.hex(),
            "crc": f"0x{self.crc:06X}",
        }

    def __str__(self) -> str:
        return (
            f"Time: {self.timestamp:.6f}, Addr: {self.address}, "
            f"PDU: {self.pdu_type_name}, RSSI: {self.rssi} dBm, "
            f"Payload: {self.payload.hex() or 'N/A'}"
        )


def rssi_bucket(rssi: int) -> int:
    """Return the lower bound of the histogram bucket holding ``rssi``."""
    return (rssi // RSSI_HISTOGRAM_BUCKET_DBM) * RSSI_HISTOGRAM_BUCKET_DBM


@dataclass
class PacketStatistics:
    """Running aggregate over every packet ingested in a capture session."""

    total_packets: int = 0
    rssi_sum: int = 0
    rssi_count: int = 0
    unique_addresses: Set[bytes] = field(default_factory=set)
    pdu_type_counts: Counter[int] = field(default_factory=Counter)
    signature_counts: Counter[bytes] = field(default_factory=Counter)
    manufacturer_counts: Counter[int] = field(default_factory=Counter)
    rssi_histogram: Counter[int] = field(default_factory=Counter)
    first_timestamp: Optional[float] = None
    last_timestamp: Optional[float] = None

    @property
    def unique_devices(self) -> int:
        return len(self.unique_addresses)

    @property
    def average_rssi(self) -> Optional[float]:
        if not self.rssi_count:
            return None
        return self.rssi_sum / self.rssi_count

    def copy(self) -> "PacketStatistics":
        """Return an independent point-in-time copy."""
        return PacketStatistics(
            total_packets=self.total_packets,
            rssi_sum=self.rssi_sum,
            rssi_count=self.rssi_count,
            unique_addresses=set(self.unique_addresses),
            pdu_type_counts=Counter(self.pdu_type_counts),
            signature_counts=Counter(self.signature_counts),
            manufacturer_counts=Counter(self.manufacturer_counts),
            rssi_histogram=Counter(self.rssi_histogram),
            first_timestamp=self.first_timestamp,
            last_timestamp=self.last_timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_packets": self.total_packets,
            "unique_devices": self.unique_devices,
            "average_rssi": self.average_rssi,
            "pdu_type_counts": {
                PDU_TYPE_NAMES.get(k, str(k)): v for k, v in sorted(self.pdu_type_counts.items())
            },
            "signature_counts": {k.hex(): v for k, v in self.signature_counts.items()},
            "manufacturer_counts": {
                f"0x{k:04X}": v for k, v in sorted(self.manufacturer_counts.items())
            },
            "rssi_histogram": {str(k): v for k, v in sorted(self.rssi_histogram.items())},
            "first_timestamp": self.first_timestamp,
            "last_timestamp": self.last_timestamp,
        }


@dataclass(frozen=True)
class Anomaly:
    """A time window in which a device advertised at an unusual rate."""

    advertiser_address: bytes
    window_start: float
    observed_count: int
    expected_count: float

    @property
    def address(self) -> str:
        return format_address(self.advertiser_address)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "window_start": self.window_start,
            "observed_count": self.observed_count,
            "expected_count": self.expected_count,
        }


class PairingMethod(str, Enum):
    JUST_WORKS = "JustWorks"
    PASSKEY_ENTRY = "PasskeyEntry"
    OUT_OF_BAND = "OutOfBand"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class SecurityReport:
    """Security indicators inferred from a set of packets.

    ``potential_mitm_vulnerability`` is an absence-of-evidence heuristic: it
    is set when no packet carried the MITM protection marker, which does not
    prove the link is unprotected.
    """

    uses_secure_connections: bool = False
    potential_mitm_vulnerability: bool = True
    pairing_method: PairingMethod = PairingMethod.UNKNOWN
    pairing_packets: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uses_secure_connections": self.uses_secure_connections,
            "potential_mitm_vulnerability": self.potential_mitm_vulnerability,
            "pairing_method": self.pairing_method.value,
            "pairing_packets": self.pairing_packets,
        }


__all__ = [
    "RawFrame",
    "Packet",
    "PacketStatistics",
    "Anomaly",
    "PairingMethod",
    "SecurityReport",
    "format_address",
    "normalize_address",
    "rssi_bucket",
]
