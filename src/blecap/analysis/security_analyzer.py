"""Security indicator analysis over captured packets."""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

from ..core.constants import (
    MITM_PROTECTION_MARKER,
    SECURE_CONNECTIONS_MARKER,
    SMP_IO_CAPABILITY_OFFSET,
    SMP_IO_KEYBOARD_DISPLAY,
    SMP_IO_KEYBOARD_ONLY,
    SMP_IO_NO_INPUT_NO_OUTPUT,
    SMP_OOB_FLAG_OFFSET,
    SMP_OOB_PRESENT,
    SMP_PAIRING_OPCODES,
    SMP_PDU_TYPE,
)
from ..core.decorators import handle_analysis_errors, log_performance
from ..core.models import Packet, PairingMethod, SecurityReport


def _field_in(offset: int, values: Tuple[int, ...]) -> Callable[[bytes], bool]:
    def check(payload: bytes) -> bool:
        return len(payload) > offset and payload[offset] in values

    return check


# Checked in order; the first method matched by any pairing packet wins.
PAIRING_METHOD_RULES: Tuple[Tuple[PairingMethod, Callable[[bytes], bool]], ...] = (
    (PairingMethod.JUST_WORKS, _field_in(SMP_IO_CAPABILITY_OFFSET, (SMP_IO_NO_INPUT_NO_OUTPUT,))),
    (
        PairingMethod.PASSKEY_ENTRY,
        _field_in(SMP_IO_CAPABILITY_OFFSET, (SMP_IO_KEYBOARD_ONLY, SMP_IO_KEYBOARD_DISPLAY)),
    ),
    (PairingMethod.OUT_OF_BAND, _field_in(SMP_OOB_FLAG_OFFSET, (SMP_OOB_PRESENT,))),
)


def is_pairing_packet(packet: Packet) -> bool:
    """Return ``True`` for SMP pairing request/response packets."""
    return (
        packet.pdu_type == SMP_PDU_TYPE
        and bool(packet.payload)
        and packet.payload[0] in SMP_PAIRING_OPCODES
    )


class SecurityAnalyzer:
    """Summarize security protocol indicators found in packets.

    No decryption or cryptographic verification is attempted; the report
    only reflects markers present in the payloads.
    """

    def __init__(
        self,
        secure_connections_marker: bytes = SECURE_CONNECTIONS_MARKER,
        mitm_protection_marker: bytes = MITM_PROTECTION_MARKER,
    ) -> None:
        self.secure_connections_marker = secure_connections_marker
        self.mitm_protection_marker = mitm_protection_marker

    def infer_pairing_method(self, pairing_packets: Sequence[Packet]) -> PairingMethod:
        for method, matches in PAIRING_METHOD_RULES:
            if any(matches(p.payload) for p in pairing_packets):
                return method
        return PairingMethod.UNKNOWN

    @handle_analysis_errors
    @log_performance
    def analyze(self, packets: Sequence[Packet]) -> SecurityReport:
        """Return a fresh :class:`SecurityReport` for ``packets``."""
        uses_sc = any(self.secure_connections_marker in p.payload for p in packets)
        # absence of the marker is treated as a potential weakness, not proof
        has_mitm = any(self.mitm_protection_marker in p.payload for p in packets)
        pairing: List[Packet] = [p for p in packets if is_pairing_packet(p)]
        return SecurityReport(
            uses_secure_connections=uses_sc,
            potential_mitm_vulnerability=not has_mitm,
            pairing_method=self.infer_pairing_method(pairing),
            pairing_packets=len(pairing),
        )


__all__ = ["SecurityAnalyzer", "PAIRING_METHOD_RULES", "is_pairing_packet"]
