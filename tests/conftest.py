import sys
from pathlib import Path

# Ensure the project root and src directory are on sys.path for test imports
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
for path in (SRC_PATH, PROJECT_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


import pytest

from blecap.heuristics.protocol_identifier import ProtocolIdentifier
from blecap.store.packet_store import PacketStore


@pytest.fixture
def identifier() -> ProtocolIdentifier:
    """Return an identifier backed by the packaged signature table."""
    return ProtocolIdentifier()


@pytest.fixture
def store() -> PacketStore:
    return PacketStore()
