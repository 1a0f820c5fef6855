"""Centralized constant definitions for blecap."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Advertising frame layout (byte offsets into a raw frame)
# ---------------------------------------------------------------------------
PREAMBLE_OFFSET: int = 0
ACCESS_ADDRESS_OFFSET: int = 1
ACCESS_ADDRESS_LENGTH: int = 4
PDU_HEADER_OFFSET: int = 5
ADVERTISER_ADDRESS_OFFSET: int = 6
ADVERTISER_ADDRESS_LENGTH: int = 6
PAYLOAD_OFFSET: int = 12
CRC_LENGTH: int = 3

# Frames shorter than this are rejected outright.
MIN_FRAME_LENGTH: int = 10
# Header plus CRC; frames between MIN_FRAME_LENGTH and this are malformed.
FIXED_FRAMING_LENGTH: int = PAYLOAD_OFFSET + CRC_LENGTH

ADVERTISING_PREAMBLE: int = 0xAA
ADVERTISING_ACCESS_ADDRESS: int = 0x8E89BED6

# ---------------------------------------------------------------------------
# PDU types (low nibble of the header byte)
# ---------------------------------------------------------------------------
PDU_TYPE_NAMES: dict[int, str] = {
    0x0: "ADV_IND",
    0x1: "ADV_DIRECT_IND",
    0x2: "ADV_NONCONN_IND",
    0x3: "SCAN_REQ",
    0x4: "SCAN_RSP",
    0x5: "CONNECT_IND",
    0x6: "SMP",
    0x7: "ADV_EXT_IND",
    0x8: "AUX_CONNECT_RSP",
}

# Security Manager Protocol frames are tagged with the SMP fixed channel id.
SMP_PDU_TYPE: int = 0x6

SMP_PAIRING_REQUEST: int = 0x01
SMP_PAIRING_RESPONSE: int = 0x02
SMP_PAIRING_OPCODES: frozenset[int] = frozenset({SMP_PAIRING_REQUEST, SMP_PAIRING_RESPONSE})

# Offsets of the pairing feature fields inside an SMP pairing request/response
SMP_IO_CAPABILITY_OFFSET: int = 1
SMP_OOB_FLAG_OFFSET: int = 2

SMP_IO_DISPLAY_ONLY: int = 0x00
SMP_IO_DISPLAY_YES_NO: int = 0x01
SMP_IO_KEYBOARD_ONLY: int = 0x02
SMP_IO_NO_INPUT_NO_OUTPUT: int = 0x03
SMP_IO_KEYBOARD_DISPLAY: int = 0x04
SMP_OOB_PRESENT: int = 0x01

# Simplified marker scheme: SMP channel id followed by the AuthReq flag bit.
SECURE_CONNECTIONS_MARKER: bytes = bytes([SMP_PDU_TYPE, 0x08])
MITM_PROTECTION_MARKER: bytes = bytes([SMP_PDU_TYPE, 0x04])

# ---------------------------------------------------------------------------
# Advertising data (AD) type codes
# ---------------------------------------------------------------------------
AD_TYPE_FLAGS: int = 0x01
AD_TYPE_INCOMPLETE_UUID16: int = 0x02
AD_TYPE_COMPLETE_UUID16: int = 0x03
AD_TYPE_SHORT_NAME: int = 0x08
AD_TYPE_COMPLETE_NAME: int = 0x09
AD_TYPE_TX_POWER: int = 0x0A
AD_TYPE_SERVICE_DATA_UUID16: int = 0x16
AD_TYPE_MANUFACTURER_DATA: int = 0xFF

AD_FLAG_NAMES: dict[int, str] = {
    0x01: "LE Limited Discoverable",
    0x02: "LE General Discoverable",
    0x04: "BR/EDR Not Supported",
    0x08: "LE and BR/EDR Controller",
    0x10: "LE and BR/EDR Host",
}

# ---------------------------------------------------------------------------
# Protocol tags
# ---------------------------------------------------------------------------
TAG_UNKNOWN: str = "Unknown"

# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------
RSSI_HISTOGRAM_BUCKET_DBM: int = 10
