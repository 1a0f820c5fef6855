from .protocol_identifier import ProtocolIdentifier, load_signature_table

__all__ = ["ProtocolIdentifier", "load_signature_table"]
