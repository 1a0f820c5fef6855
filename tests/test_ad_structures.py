from blecap.core.constants import AD_TYPE_MANUFACTURER_DATA
from blecap.parsers.ad_structures import AD_DECODERS, decode_advertising_data
from tests.fixtures.frame_factory import FrameFactory, ad


def test_decode_named_payload():
    data = decode_advertising_data(FrameFactory.named_payload("Thermo", tx_power=-12))
    assert data.local_name == "Thermo"
    assert data.tx_power == -12
    assert "LE General Discoverable" in data.flags
    assert "BR/EDR Not Supported" in data.flags
    assert not data.truncated


def test_decode_manufacturer_data():
    data = decode_advertising_data(FrameFactory.ibeacon_payload())
    assert list(data.manufacturer_data) == [0x004C]
    assert data.manufacturer_data[0x004C].startswith(b"\x02\x15")


def test_decode_service_uuids_and_data():
    data = decode_advertising_data(FrameFactory.eddystone_payload())
    assert data.service_uuids == ["FEAA"]
    assert data.service_data == {"FEAA": b"\x10\xf8"}


def test_unknown_types_are_kept_raw():
    payload = ad(0x2A, b"\x01\x02")
    data = decode_advertising_data(payload)
    assert 0x2A not in AD_DECODERS
    assert data.structures == [(0x2A, b"\x01\x02")]


def test_truncated_structure_stops_decoding():
    payload = ad(0x09, b"ok") + bytes([0x08, AD_TYPE_MANUFACTURER_DATA, 0x4C])
    data = decode_advertising_data(payload)
    assert data.local_name == "ok"
    assert data.manufacturer_data == {}
    assert data.truncated


def test_zero_length_entry_ends_data():
    payload = ad(0x09, b"x") + b"\x00" + ad(0x09, b"ignored")
    data = decode_advertising_data(payload)
    assert data.local_name == "x"
    assert not data.truncated
