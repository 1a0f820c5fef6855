"""Decoding of the length/type/value advertising data structures.

Each recognised AD type code maps to a decoder in ``AD_DECODERS``; adding a
type is a table entry. Structures whose type is not in the table are kept
raw in :attr:`AdvertisingData.structures`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from ..core.constants import (
    AD_FLAG_NAMES,
    AD_TYPE_COMPLETE_NAME,
    AD_TYPE_COMPLETE_UUID16,
    AD_TYPE_FLAGS,
    AD_TYPE_INCOMPLETE_UUID16,
    AD_TYPE_MANUFACTURER_DATA,
    AD_TYPE_SERVICE_DATA_UUID16,
    AD_TYPE_SHORT_NAME,
    AD_TYPE_TX_POWER,
)


@dataclass
class AdvertisingData:
    """Decoded view of an advertising payload."""

    flags: List[str] = field(default_factory=list)
    local_name: str = ""
    tx_power: int | None = None
    service_uuids: List[str] = field(default_factory=list)
    service_data: Dict[str, bytes] = field(default_factory=dict)
    manufacturer_data: Dict[int, bytes] = field(default_factory=dict)
    structures: List[Tuple[int, bytes]] = field(default_factory=list)
    truncated: bool = False


def _decode_flags(value: bytes, ad: AdvertisingData) -> None:
    if value:
        ad.flags = [name for bit, name in AD_FLAG_NAMES.items() if value[0] & bit]


def _decode_uuid16_list(value: bytes, ad: AdvertisingData) -> None:
    for i in range(0, len(value) - 1, 2):
        ad.service_uuids.append(f"{int.from_bytes(value[i:i + 2], 'little'):04X}")


def _decode_name(value: bytes, ad: AdvertisingData) -> None:
    ad.local_name = value.decode("utf-8", errors="replace")


def _decode_tx_power(value: bytes, ad: AdvertisingData) -> None:
    if value:
        ad.tx_power = int.from_bytes(value[:1], "little", signed=True)


def _decode_service_data(value: bytes, ad: AdvertisingData) -> None:
    if len(value) >= 2:
        uuid = f"{int.from_bytes(value[:2], 'little'):04X}"
        ad.service_data[uuid] = value[2:]


def _decode_manufacturer(value: bytes, ad: AdvertisingData) -> None:
    if len(value) >= 2:
        ad.manufacturer_data[int.from_bytes(value[:2], "little")] = value[2:]


AD_DECODERS: Dict[int, Callable[[bytes, AdvertisingData], None]] = {
    AD_TYPE_FLAGS: _decode_flags,
    AD_TYPE_INCOMPLETE_UUID16: _decode_uuid16_list,
    AD_TYPE_COMPLETE_UUID16: _decode_uuid16_list,
    AD_TYPE_SHORT_NAME: _decode_name,
    AD_TYPE_COMPLETE_NAME: _decode_name,
    AD_TYPE_TX_POWER: _decode_tx_power,
    AD_TYPE_SERVICE_DATA_UUID16: _decode_service_data,
    AD_TYPE_MANUFACTURER_DATA: _decode_manufacturer,
}


def iter_ad_structures(payload: bytes):
    """Yield ``(type_code, value)`` pairs; stops at the first truncated entry.

    Returns ``True`` through ``StopIteration.value`` when decoding stopped
    because of truncation.
    """
    offset = 0
    while offset < len(payload):
        length = payload[offset]
        if length == 0:
            # zero-length entries mark the end of significant data
            return False
        end = offset + 1 + length
        if end > len(payload):
            return True
        yield payload[offset + 1], bytes(payload[offset + 2:end])
        offset = end
    return False


def decode_advertising_data(payload: bytes) -> AdvertisingData:
    """Decode ``payload`` into :class:`AdvertisingData`."""
    ad = AdvertisingData()
    structures = iter_ad_structures(payload)
    while True:
        try:
            type_code, value = next(structures)
        except StopIteration as stop:
            ad.truncated = bool(stop.value)
            break
        ad.structures.append((type_code, value))
        decoder = AD_DECODERS.get(type_code)
        if decoder is not None:
            decoder(value, ad)
    return ad


__all__ = ["AdvertisingData", "AD_DECODERS", "decode_advertising_data", "iter_ad_structures"]
