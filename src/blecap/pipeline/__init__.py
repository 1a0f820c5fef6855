"""Ingestion pipeline for captured advertising frames."""

from .ingestion import BatchListener, IngestionPipeline
from .sources import BaseFrameSource, IterableFrameSource, pump

__all__ = ["IngestionPipeline", "BatchListener", "BaseFrameSource", "IterableFrameSource", "pump"]
