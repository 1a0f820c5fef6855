import pytest

from blecap.analysis.anomaly_detector import AnomalyDetector
from blecap.exceptions import AnalysisError
from tests.fixtures.frame_factory import DEVICE_A, DEVICE_B, FrameFactory


def _device_packets(address, counts, window=1.0):
    packets = []
    for idx, count in enumerate(counts):
        for k in range(count):
            packets.append(FrameFactory.packet(address=address, timestamp=idx * window + k * 0.01))
    return packets


def test_constant_rate_has_no_anomalies():
    packets = _device_packets(DEVICE_A, [3] * 6)
    assert AnomalyDetector().detect_anomalies(packets, 1.0) == []
    assert AnomalyDetector().detect_anomalies(packets, 1.0, 0.0) == []


def test_single_spike_in_five_windows():
    packets = _device_packets(DEVICE_A, [2, 2, 20, 2, 2])
    anomalies = AnomalyDetector().detect_anomalies(packets, 1.0, deviation_threshold=1.5)

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.advertiser_address == DEVICE_A
    assert anomaly.window_start == 2.0
    assert anomaly.observed_count == 20
    assert anomaly.expected_count == pytest.approx(5.6)


def test_single_spike_with_default_threshold():
    counts = [2] * 11 + [20]
    packets = _device_packets(DEVICE_A, counts)
    anomalies = AnomalyDetector(time_window=1.0).detect_anomalies(packets)
    assert [(a.window_start, a.observed_count) for a in anomalies] == [(11.0, 20)]


def test_single_window_device_never_flagged():
    packets = [FrameFactory.packet(timestamp=0.1 * i) for i in range(50)]
    assert AnomalyDetector().detect_anomalies(packets, 10.0, 0.0) == []


def test_devices_are_thresholded_independently():
    quiet = _device_packets(DEVICE_A, [2] * 12)
    loud = _device_packets(DEVICE_B, [2] * 11 + [20])
    anomalies = AnomalyDetector().detect_anomalies(quiet + loud, 1.0)
    assert [a.advertiser_address for a in anomalies] == [DEVICE_B]


def test_window_bucketing():
    packets = [FrameFactory.packet(timestamp=t) for t in (0.5, 1.9, 2.0, 5.99)]
    counts = AnomalyDetector.window_counts(packets, 2.0)
    assert list(counts["window_start"]) == [0.0, 2.0, 4.0]
    assert list(counts["observed"]) == [2, 1, 1]


def test_empty_input():
    assert AnomalyDetector().detect_anomalies([], 1.0) == []


def test_invalid_window_raises_analysis_error():
    with pytest.raises(AnalysisError):
        AnomalyDetector().detect_anomalies([FrameFactory.packet()], 0)


def test_anomaly_to_dict():
    packets = _device_packets(DEVICE_A, [2] * 11 + [20])
    data = AnomalyDetector().detect_anomalies(packets, 1.0)[0].to_dict()
    assert data["address"] == "06:05:04:03:02:01"
    assert data["observed_count"] == 20
