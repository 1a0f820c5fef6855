import pytest
from hypothesis import given, strategies as st

from blecap.core.constants import FIXED_FRAMING_LENGTH, MIN_FRAME_LENGTH
from blecap.exceptions import FrameTooShortError, ParseError
from blecap.metrics.statistics_aggregator import StatisticsAggregator
from blecap.parsers import decode_advertising_data, parse
from tests.fixtures.frame_factory import FrameFactory


@given(st.binary(max_size=MIN_FRAME_LENGTH - 1))
def test_short_frames_always_rejected(raw):
    with pytest.raises(FrameTooShortError):
        parse(raw)


@given(st.binary(min_size=FIXED_FRAMING_LENGTH, max_size=64))
def test_valid_frames_roundtrip(raw):
    pkt = parse(raw)
    assert len(pkt.payload) == len(raw) - FIXED_FRAMING_LENGTH
    assert pkt.to_bytes() == raw


@given(st.binary(max_size=40))
def test_parse_only_raises_parse_errors(raw):
    try:
        parse(raw)
    except ParseError:
        pass


@given(st.binary(max_size=64))
def test_ad_decoding_never_raises(payload):
    data = decode_advertising_data(payload)
    assert isinstance(data.structures, list)


@given(st.lists(st.integers(min_value=0, max_value=5), min_size=1, max_size=8))
def test_total_packets_monotonic(batch_sizes):
    agg = StatisticsAggregator()
    total = 0
    for size in batch_sizes:
        agg.ingest([FrameFactory.packet(rssi=-30 - size) for _ in range(size)])
        total += size
        assert agg.snapshot().total_packets == total
