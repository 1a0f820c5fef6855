"""Positional decoder for raw advertising frames."""

from __future__ import annotations

from ..core.constants import (
    ACCESS_ADDRESS_LENGTH,
    ACCESS_ADDRESS_OFFSET,
    ADVERTISER_ADDRESS_LENGTH,
    ADVERTISER_ADDRESS_OFFSET,
    CRC_LENGTH,
    FIXED_FRAMING_LENGTH,
    MIN_FRAME_LENGTH,
    PAYLOAD_OFFSET,
    PDU_HEADER_OFFSET,
    PREAMBLE_OFFSET,
)
from ..core.models import Packet, RawFrame
from ..exceptions import FrameTooShortError, MalformedFrameError


def parse(raw: bytes, timestamp: float = 0.0, rssi: int = 0) -> Packet:
    """Decode ``raw`` into a :class:`Packet`.

    Field extraction is purely positional. ``FrameTooShortError`` is raised
    for buffers under ``MIN_FRAME_LENGTH`` bytes and ``MalformedFrameError``
    when the buffer cannot hold the fixed header and CRC.
    """
    length = len(raw)
    if length < MIN_FRAME_LENGTH:
        raise FrameTooShortError(
            f"Frame of {length} bytes is shorter than {MIN_FRAME_LENGTH}",
            context=raw.hex(),
        )

    payload_length = length - FIXED_FRAMING_LENGTH
    if payload_length < 0:
        raise MalformedFrameError(
            f"Frame of {length} bytes leaves a negative payload length ({payload_length})",
            context=raw.hex(),
            suggestion=f"Advertising frames need at least {FIXED_FRAMING_LENGTH} bytes",
        )

    header = raw[PDU_HEADER_OFFSET]
    return Packet(
        preamble=raw[PREAMBLE_OFFSET],
        access_address=int.from_bytes(
            raw[ACCESS_ADDRESS_OFFSET:ACCESS_ADDRESS_OFFSET + ACCESS_ADDRESS_LENGTH], "little"
        ),
        pdu_type=header & 0x0F,
        pdu_length=(header >> 4) & 0x0F,
        advertiser_address=bytes(
            raw[ADVERTISER_ADDRESS_OFFSET:ADVERTISER_ADDRESS_OFFSET + ADVERTISER_ADDRESS_LENGTH]
        ),
        payload=bytes(raw[PAYLOAD_OFFSET:PAYLOAD_OFFSET + payload_length]),
        crc=int.from_bytes(raw[length - CRC_LENGTH:], "little"),
        timestamp=float(timestamp),
        rssi=int(rssi),
    )


def parse_frame(frame: RawFrame) -> Packet:
    """Decode a :class:`RawFrame` carrying its timestamp and RSSI."""
    return parse(frame.data, frame.timestamp, frame.rssi)


__all__ = ["parse", "parse_frame"]
