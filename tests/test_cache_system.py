from blecap.core.cache import PayloadCache


def test_payload_cache_stats_and_clear():
    cache = PayloadCache(maxsize=2, enabled=True)
    calls = []

    @cache.memoize
    def payload_length(payload: bytes) -> int:
        calls.append(payload)
        return len(payload)

    assert payload_length(b"\x01\x02") == 2
    assert payload_length(b"\x01\x02") == 2
    assert calls == [b"\x01\x02"]
    assert cache.stats()["payload_length"].hits == 1
    cache.clear()
    assert cache.stats()["payload_length"].hits == 0


def test_disabled_cache_is_passthrough():
    cache = PayloadCache(enabled=False)

    def identity(payload: bytes) -> bytes:
        return payload

    assert cache.memoize(identity) is identity
    assert cache.stats() == {"enabled": False}
