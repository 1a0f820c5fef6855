from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Generator, Iterable

from ..core.models import RawFrame
from ..logging import get_logger

logger = get_logger(__name__)


class BaseFrameSource(ABC):
    """Abstract base class for producers of :class:`RawFrame` objects."""

    @abstractmethod
    def frames(self) -> Generator[RawFrame, None, None]:
        """Yield captured frames in arrival order."""


class IterableFrameSource(BaseFrameSource):
    """Expose any iterable of frames as a frame source."""

    def __init__(self, frames: Iterable[RawFrame]) -> None:
        self._frames = frames

    def frames(self) -> Generator[RawFrame, None, None]:
        yield from self._frames


def pump(source: BaseFrameSource, sink: Callable[[RawFrame], bool]) -> int:
    """Push every frame from ``source`` into ``sink``; return the accepted count."""
    accepted = 0
    for frame in source.frames():
        if sink(frame):
            accepted += 1
        else:
            logger.info("Sink rejected frame; stopping pump after %d frames", accepted)
            break
    return accepted


__all__ = ["BaseFrameSource", "IterableFrameSource", "pump"]
