import pytest

from blecap.flows.flow_models import DeviceFlow, FlowReconstructor
from tests.fixtures.frame_factory import DEVICE_A, DEVICE_B, FrameFactory


def _alternating(store):
    packets = []
    for i in range(10):
        address = DEVICE_A if i % 2 == 0 else DEVICE_B
        packets.append(FrameFactory.packet(address=address, timestamp=float(i), rssi=-50 - i))
    store.extend(packets)
    return packets


def test_flow_returns_device_packets_in_order(store):
    packets = _alternating(store)
    flows = FlowReconstructor(store)

    flow_a = flows.flow(DEVICE_A)
    flow_b = flows.flow(DEVICE_B)
    assert flow_a == packets[0::2]
    assert flow_b == packets[1::2]
    assert len(flow_a) == len(flow_b) == 5
    assert flows.flow("00:00:00:00:00:00") == []


def test_device_flow_summary(store, identifier):
    store.extend([
        FrameFactory.packet(payload=FrameFactory.named_payload("Tag"), timestamp=1.0, rssi=-40),
        FrameFactory.packet(payload=FrameFactory.ibeacon_payload(), timestamp=4.0, rssi=-60),
    ])
    summary = FlowReconstructor(store, identifier).summary(DEVICE_A)

    assert summary.address == "06:05:04:03:02:01"
    assert summary.packet_count == 2
    assert summary.duration == 3.0
    assert summary.rssi_min == -60
    assert summary.rssi_max == -40
    assert summary.rssi_mean == -50
    assert summary.local_name == "Tag"
    assert summary.protocols == frozenset({"iBeacon"})


def test_summaries_cover_every_device(store):
    _alternating(store)
    flows = FlowReconstructor(store)
    summaries = flows.summaries()
    assert [s.address for s in summaries] == flows.devices()
    assert [s.packet_count for s in summaries] == [5, 5]
    assert flows.summary(b"\x00" * 6) is None


def test_from_packets_validation():
    with pytest.raises(ValueError):
        DeviceFlow.from_packets([])
    with pytest.raises(ValueError):
        DeviceFlow.from_packets([FrameFactory.packet(), FrameFactory.packet(address=DEVICE_B)])
