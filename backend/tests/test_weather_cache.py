from weather_widgets.schemas.weather import WeatherSnapshot
from weather_widgets.utils.weather_cache import WeatherCache


def make_snapshot(location="Berlin", temperature=21.4):
    return WeatherSnapshot(
        location=location,
        temperature=temperature,
        unit="°C",
        conditions="Clear sky",
        wind_kph=12.0,
        humidity=55,
        fetched_at="2026-01-01T00:00:00.000Z",
        source="open-meteo",
    )


def test_get_within_ttl_marks_source_cache(cache, clock):
    snapshot = make_snapshot()
    cache.put("berlin", snapshot)
    clock.advance(299)

    cached = cache.get("berlin")
    assert cached is not None
    assert cached.source == "cache"
    assert cached.model_dump(exclude={"source"}) == snapshot.model_dump(exclude={"source"})
    # stored entry is untouched
    assert snapshot.source == "open-meteo"


def test_get_missing_key_is_none(cache):
    assert cache.get("nowhere") is None


def test_get_after_ttl_is_none_and_drops_entry(cache, clock):
    cache.put("berlin", make_snapshot())
    clock.advance(300)

    assert cache.get("berlin") is None
    assert "berlin" not in cache


def test_reads_do_not_extend_ttl(cache, clock):
    cache.put("berlin", make_snapshot())
    clock.advance(200)
    assert cache.get("berlin") is not None
    clock.advance(150)
    assert cache.get("berlin") is None


def test_put_replaces_entry_and_restamps(cache, clock):
    cache.put("berlin", make_snapshot(temperature=1.0))
    clock.advance(250)
    cache.put("berlin", make_snapshot(temperature=2.0))
    clock.advance(250)

    cached = cache.get("berlin")
    assert cached is not None
    assert cached.temperature == 2.0


def test_sweep_removes_only_expired(cache, clock):
    cache.put("berlin", make_snapshot())
    clock.advance(200)
    cache.put("paris", make_snapshot("Paris"))
    clock.advance(100)

    assert cache.sweep() == 1
    assert "berlin" not in cache
    assert "paris" in cache
    assert len(cache) == 1


def test_clear_empties_cache():
    cache = WeatherCache(ttl_seconds=60)
    cache.put("berlin", make_snapshot())
    cache.clear()
    assert len(cache) == 0
