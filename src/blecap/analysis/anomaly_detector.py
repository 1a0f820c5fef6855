"""Per-device advertising rate anomaly detection."""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..core.config import settings
from ..core.decorators import handle_analysis_errors, log_performance
from ..core.models import Anomaly, Packet


class AnomalyDetector:
    """Flag time windows where a device's packet count departs from its norm.

    Each device is bucketed into fixed windows of ``time_window`` seconds
    (``floor(ts / time_window) * time_window``). Only windows holding at
    least one packet take part. A window is anomalous when its count differs
    from the device's mean by more than ``deviation_threshold`` population
    standard deviations. Devices whose counts do not vary, including those
    seen in a single window, never produce anomalies.
    """

    def __init__(
        self,
        time_window: Optional[float] = None,
        deviation_threshold: Optional[float] = None,
    ) -> None:
        self.time_window = time_window if time_window is not None else settings.anomaly_time_window
        self.deviation_threshold = (
            deviation_threshold if deviation_threshold is not None else settings.deviation_threshold
        )

    @staticmethod
    def window_counts(packets: Sequence[Packet], time_window: float) -> pd.DataFrame:
        """Return per-device packet counts for each occupied window."""
        columns = ["address", "window_start", "observed"]
        if not packets:
            return pd.DataFrame(columns=columns)
        df = pd.DataFrame(
            {
                "address": [p.advertiser_address for p in packets],
                "timestamp": [p.timestamp for p in packets],
            }
        )
        df["window_start"] = np.floor(df["timestamp"] / time_window) * time_window
        return (
            df.groupby(["address", "window_start"], sort=True)
            .size()
            .rename("observed")
            .reset_index()[columns]
        )

    @handle_analysis_errors
    @log_performance
    def detect_anomalies(
        self,
        packets: Sequence[Packet],
        time_window: Optional[float] = None,
        deviation_threshold: Optional[float] = None,
    ) -> List[Anomaly]:
        """Return anomalies ordered by window start then address."""
        window = self.time_window if time_window is None else time_window
        threshold = self.deviation_threshold if deviation_threshold is None else deviation_threshold
        if window <= 0:
            raise ValueError(f"time_window must be positive, got {window}")
        if threshold < 0:
            raise ValueError(f"deviation_threshold must not be negative, got {threshold}")

        counts = self.window_counts(packets, window)
        if counts.empty:
            return []

        grouped = counts.groupby("address", sort=False)["observed"]
        counts["expected"] = grouped.transform("mean")
        counts["std"] = grouped.transform(lambda s: s.std(ddof=0))

        deviation = (counts["observed"] - counts["expected"]).abs()
        flagged = counts[(counts["std"] > 0) & (deviation > threshold * counts["std"])]
        flagged = flagged.sort_values(["window_start", "address"], kind="stable")

        return [
            Anomaly(
                advertiser_address=row.address,
                window_start=float(row.window_start),
                observed_count=int(row.observed),
                expected_count=float(row.expected),
            )
            for row in flagged.itertuples(index=False)
        ]


__all__ = ["AnomalyDetector"]
