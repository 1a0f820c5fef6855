"""Bounded micro-batching ingestion of raw frames."""

from __future__ import annotations

import threading
import time
from collections import deque
from contextlib import contextmanager
from typing import Callable, Deque, Iterator, List, Optional

from ..core.config import settings
from ..core.models import Packet, RawFrame
from ..core.types import PipelineCounters
from ..exceptions import ParseError, PipelineError
from ..logging import get_logger
from ..metrics.statistics_aggregator import StatisticsAggregator
from ..parsers.advertising import parse_frame
from ..store.packet_store import PacketStore

logger = get_logger(__name__)

BatchListener = Callable[[List[Packet]], None]


def _empty_counters() -> PipelineCounters:
    return PipelineCounters(
        received_frames=0,
        processed_frames=0,
        dropped_frames=0,
        malformed_frames=0,
        rejected_frames=0,
        batches=0,
        last_error=None,
    )


class IngestionPipeline:
    """Buffer raw frames and deliver parsed batches to the store and aggregator.

    Producers never block: when the buffer holds ``capacity`` frames the
    oldest one is discarded. A background consumer releases the buffer when
    it reaches ``flush_threshold`` frames or ``flush_interval`` seconds have
    elapsed, whichever comes first. Batches are consumed one at a time.
    """

    def __init__(
        self,
        store: PacketStore,
        aggregator: StatisticsAggregator,
        *,
        capacity: Optional[int] = None,
        flush_threshold: Optional[int] = None,
        flush_interval: Optional[float] = None,
        parser: Callable[[RawFrame], Packet] = parse_frame,
    ) -> None:
        self.store = store
        self.aggregator = aggregator
        self.capacity = capacity if capacity is not None else settings.buffer_capacity
        if self.capacity <= 0:
            raise PipelineError(f"capacity must be positive, got {self.capacity}")
        threshold = flush_threshold if flush_threshold is not None else settings.flush_threshold
        self.flush_threshold = max(1, min(threshold, self.capacity))
        self.flush_interval = flush_interval if flush_interval is not None else settings.flush_interval
        if self.flush_interval <= 0:
            raise PipelineError(f"flush_interval must be positive, got {self.flush_interval}")
        self.parser = parser

        self._buffer: Deque[RawFrame] = deque()
        self._cond = threading.Condition()
        self._consume_lock = threading.RLock()
        self._listeners: List[BatchListener] = []
        self._counters = _empty_counters()
        self._accepting = True
        self._stopping = False
        self._stopped = False
        self._thread: Optional[threading.Thread] = None
        self.last_error: Optional[BaseException] = None

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def ingest(self, frame: RawFrame) -> bool:
        """Buffer ``frame``; returns ``False`` once the pipeline is stopped."""
        with self._cond:
            if not self._accepting:
                self._counters["rejected_frames"] += 1
                return False
            self._counters["received_frames"] += 1
            if len(self._buffer) >= self.capacity:
                self._buffer.popleft()
                self._counters["dropped_frames"] += 1
                logger.debug("Buffer full (%d frames); dropped oldest frame", self.capacity)
            self._buffer.append(frame)
            if len(self._buffer) >= self.flush_threshold:
                self._cond.notify()
        return True

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    def add_listener(self, listener: BatchListener) -> None:
        """Register ``listener`` to receive every delivered batch."""
        self._listeners.append(listener)

    def flush(self) -> int:
        """Process everything currently buffered and return the packets delivered."""
        with self._consume_lock:
            with self._cond:
                frames = list(self._buffer)
                self._buffer.clear()
            if not frames:
                return 0
            return self._process(frames)

    def discard_pending(self) -> int:
        """Drop every buffered frame without processing it; returns the count."""
        with self._cond:
            discarded = len(self._buffer)
            self._buffer.clear()
            self._counters["dropped_frames"] += discarded
        if discarded:
            logger.info("Discarded %d buffered frames", discarded)
        return discarded

    def _process(self, frames: List[RawFrame]) -> int:
        batch: List[Packet] = []
        malformed = 0
        try:
            for frame in frames:
                try:
                    batch.append(self.parser(frame))
                except ParseError as exc:
                    malformed += 1
                    logger.debug("Dropping malformed frame at %.6f: %s", frame.timestamp, exc)

            batch.sort(key=lambda p: p.timestamp)
            if batch:
                self.store.extend(batch)
                self.aggregator.ingest(batch)
        finally:
            with self._cond:
                self._counters["processed_frames"] += len(frames)
                self._counters["malformed_frames"] += malformed
                self._counters["batches"] += 1

        if batch:
            for listener in list(self._listeners):
                try:
                    listener(batch)
                except Exception as exc:
                    self.last_error = exc
                    logger.error("Batch listener %r failed: %s", listener, exc, exc_info=True)
        logger.debug(
            "Delivered batch of %d packets (%d malformed frames)", len(batch), malformed
        )
        return len(batch)

    def _run(self) -> None:
        while True:
            with self._cond:
                deadline = time.monotonic() + self.flush_interval
                while not self._stopping and len(self._buffer) < self.flush_threshold:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        break
                    self._cond.wait(remaining)
                stopping = self._stopping
            try:
                self.flush()
            except Exception as exc:
                self.last_error = exc
                logger.error("Batch processing failed: %s", exc, exc_info=True)
            if stopping:
                return

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def pending(self) -> int:
        with self._cond:
            return len(self._buffer)

    def start(self) -> None:
        """Start the background consumer thread."""
        if self._stopped:
            raise PipelineError(
                "Pipeline has been stopped",
                suggestion="Create a new pipeline or session to capture again",
            )
        if self.running:
            logger.warning("Ingestion pipeline already running")
            return
        self._thread = threading.Thread(target=self._run, name="blecap-ingest", daemon=True)
        self._thread.start()
        logger.info(
            "Ingestion started (capacity=%d, threshold=%d, interval=%.3fs)",
            self.capacity,
            self.flush_threshold,
            self.flush_interval,
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop accepting frames and flush anything already buffered."""
        with self._cond:
            self._accepting = False
            self._stopping = True
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Ingestion thread did not finish within %s seconds", timeout)
            self._thread = None
        self.flush()
        self._stopped = True
        counters = self.counters()
        logger.info(
            "Ingestion stopped: %d received, %d dropped, %d malformed",
            counters["received_frames"],
            counters["dropped_frames"],
            counters["malformed_frames"],
        )

    @contextmanager
    def batch_barrier(self) -> Iterator[None]:
        """Hold off batch delivery so readers see one consistent prefix."""
        with self._consume_lock:
            yield

    def counters(self) -> PipelineCounters:
        with self._cond:
            counters = PipelineCounters(**self._counters)
        error = self.last_error
        counters["last_error"] = f"{type(error).__name__}: {error}" if error is not None else None
        return counters

    def reset_counters(self) -> None:
        with self._cond:
            self._counters = _empty_counters()
            self.last_error = None


__all__ = ["IngestionPipeline", "BatchListener"]
