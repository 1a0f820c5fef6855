"""Signature based classification of advertising payloads."""

from __future__ import annotations

from pathlib import Path
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

import yaml

from ..core.cache import PayloadCache
from ..core.constants import TAG_UNKNOWN
from ..core.models import Packet
from ..exceptions import SignatureTableError
from ..logging import get_logger

logger = get_logger(__name__)

SignatureTable = Tuple[Tuple[str, Tuple[bytes, ...]], ...]

DEFAULT_SIGNATURES_PATH = Path(__file__).with_name("signatures.yaml")


def _normalize_table(entries: Iterable[Mapping[str, Any]]) -> SignatureTable:
    table: List[Tuple[str, Tuple[bytes, ...]]] = []
    for entry in entries:
        tag = entry.get("tag") if isinstance(entry, Mapping) else None
        if not isinstance(tag, str) or not tag:
            raise SignatureTableError(f"Invalid or missing 'tag' in signature entry: {entry}")
        raw = entry.get("signatures") or []
        signatures: List[bytes] = []
        for sig in raw:
            try:
                value = bytes(sig) if isinstance(sig, (bytes, bytearray, list)) else bytes.fromhex(str(sig))
            except ValueError as exc:
                raise SignatureTableError(
                    f"Invalid signature {sig!r} for protocol '{tag}'",
                    suggestion="Signatures are hex strings such as '0303'",
                ) from exc
            if not value:
                raise SignatureTableError(f"Empty signature for protocol '{tag}'")
            signatures.append(value)
        if not signatures:
            raise SignatureTableError(f"Protocol '{tag}' has no signatures")
        table.append((tag, tuple(signatures)))
    return tuple(table)


def load_signature_table(path: str | Path | None = None) -> SignatureTable:
    """Load a signature table from a YAML file."""
    table_path = Path(path) if path is not None else DEFAULT_SIGNATURES_PATH
    try:
        with table_path.open("r", encoding="utf-8") as fh:
            cfg = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise SignatureTableError(f"Failed to load signature table '{table_path}': {exc}") from exc
    return _normalize_table(cfg.get("protocols", []))


class ProtocolIdentifier:
    """Classify packets by searching their payload for known byte signatures.

    The table is data: adding a protocol means adding an entry to
    ``signatures.yaml`` or to the ``table`` passed in.
    """

    def __init__(
        self,
        table: Optional[Sequence[Mapping[str, Any]]] = None,
        *,
        table_path: str | Path | None = None,
        cache: Optional[PayloadCache] = None,
    ) -> None:
        if table is not None:
            self.table = _normalize_table(table)
        else:
            self.table = load_signature_table(table_path)
        self._cache = cache if cache is not None else PayloadCache()
        self._match = self._cache.memoize(self._match_payload)
        logger.debug("Loaded %d protocol signatures", len(self.table))

    def _match_payload(self, payload: bytes) -> Tuple[FrozenSet[str], Tuple[bytes, ...]]:
        tags = set()
        matched: List[bytes] = []
        for tag, signatures in self.table:
            for sig in signatures:
                if sig in payload:
                    tags.add(tag)
                    matched.append(sig)
        return frozenset(tags), tuple(matched)

    @property
    def tags(self) -> List[str]:
        return [tag for tag, _ in self.table]

    def classify(self, packet: Packet) -> FrozenSet[str]:
        """Return the protocol tags matched by ``packet``; ``{Unknown}`` if none."""
        return self.classify_payload(packet.payload)

    def classify_payload(self, payload: bytes) -> FrozenSet[str]:
        tags, _ = self._match(bytes(payload))
        return tags if tags else frozenset({TAG_UNKNOWN})

    def matched_signatures(self, payload: bytes) -> Tuple[bytes, ...]:
        """Return the raw signature bytes found in ``payload``."""
        _, matched = self._match(bytes(payload))
        return matched

    def cache_stats(self) -> dict[str, Any]:
        return self._cache.stats()

    def clear_cache(self) -> None:
        self._cache.clear()


__all__ = ["ProtocolIdentifier", "load_signature_table", "SignatureTable"]
