from __future__ import annotations

from blecap.core.constants import (
    ADVERTISING_ACCESS_ADDRESS,
    ADVERTISING_PREAMBLE,
    AD_TYPE_COMPLETE_NAME,
    AD_TYPE_COMPLETE_UUID16,
    AD_TYPE_FLAGS,
    AD_TYPE_MANUFACTURER_DATA,
    AD_TYPE_SERVICE_DATA_UUID16,
    AD_TYPE_TX_POWER,
    SMP_PAIRING_REQUEST,
    SMP_PDU_TYPE,
)
from blecap.core.models import Packet, RawFrame
from blecap.parsers import parse

DEVICE_A = bytes.fromhex("010203040506")
DEVICE_B = bytes.fromhex("a1a2a3a4a5a6")
DEVICE_C = bytes.fromhex("c1c2c3c4c5c6")


def ad(type_code: int, value: bytes) -> bytes:
    """Return a single length/type/value advertising structure."""
    return bytes([len(value) + 1, type_code]) + value


class FrameFactory:
    """Utility factory for building raw advertising frames and payloads."""

    @staticmethod
    def frame_bytes(
        address: bytes = DEVICE_A,
        payload: bytes = b"",
        pdu_type: int = 0,
        pdu_length: int = 0,
        preamble: int = ADVERTISING_PREAMBLE,
        access_address: int = ADVERTISING_ACCESS_ADDRESS,
        crc: int = 0x123456,
    ) -> bytes:
        header = (pdu_length & 0x0F) << 4 | (pdu_type & 0x0F)
        return (
            bytes([preamble])
            + access_address.to_bytes(4, "little")
            + bytes([header])
            + address
            + payload
            + crc.to_bytes(3, "little")
        )

    @staticmethod
    def raw_frame(
        address: bytes = DEVICE_A,
        payload: bytes = b"",
        timestamp: float = 0.0,
        rssi: int = -60,
        pdu_type: int = 0,
    ) -> RawFrame:
        data = FrameFactory.frame_bytes(address=address, payload=payload, pdu_type=pdu_type)
        return RawFrame(data=data, timestamp=timestamp, rssi=rssi)

    @staticmethod
    def packet(
        address: bytes = DEVICE_A,
        payload: bytes = b"",
        timestamp: float = 0.0,
        rssi: int = -60,
        pdu_type: int = 0,
    ) -> Packet:
        data = FrameFactory.frame_bytes(address=address, payload=payload, pdu_type=pdu_type)
        return parse(data, timestamp, rssi)

    @staticmethod
    def ibeacon_payload() -> bytes:
        body = bytes.fromhex("4c000215") + bytes(16) + bytes.fromhex("00010002c5")
        return ad(AD_TYPE_FLAGS, b"\x06") + ad(AD_TYPE_MANUFACTURER_DATA, body)

    @staticmethod
    def eddystone_payload() -> bytes:
        return (
            ad(AD_TYPE_FLAGS, b"\x06")
            + ad(AD_TYPE_COMPLETE_UUID16, bytes.fromhex("aafe"))
            + ad(AD_TYPE_SERVICE_DATA_UUID16, bytes.fromhex("aafe10f8"))
        )

    @staticmethod
    def named_payload(name: str, tx_power: int = -8) -> bytes:
        return (
            ad(AD_TYPE_FLAGS, b"\x06")
            + ad(AD_TYPE_COMPLETE_NAME, name.encode("utf-8"))
            + ad(AD_TYPE_TX_POWER, tx_power.to_bytes(1, "little", signed=True))
        )

    @staticmethod
    def plain_payload() -> bytes:
        return bytes.fromhex("0201061107")

    @staticmethod
    def pairing_payload(
        io_capability: int,
        oob_flag: int = 0x00,
        auth_req: int = 0x01,
        opcode: int = SMP_PAIRING_REQUEST,
    ) -> bytes:
        return bytes([opcode, io_capability, oob_flag, auth_req, 0x10, 0x07, 0x07])

    @staticmethod
    def pairing_packet(io_capability: int, oob_flag: int = 0x00, **kwargs) -> Packet:
        payload = FrameFactory.pairing_payload(io_capability, oob_flag)
        return FrameFactory.packet(payload=payload, pdu_type=SMP_PDU_TYPE, **kwargs)
