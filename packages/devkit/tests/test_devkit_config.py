from devkit.config import load_settings


def test_load_settings_reads_env(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://example")
    monkeypatch.setenv("NEARBY_RADIUS_KM", "2.5")
    monkeypatch.setenv("DISTANCE_CACHE_MAX_ENTRIES", "1000")
    settings = load_settings("api")

    assert settings.SERVICE_NAME == "api"
    assert settings.DATABASE_URL == "postgresql://example"
    assert settings.NEARBY_RADIUS_KM == 2.5
    assert settings.DISTANCE_CACHE_MAX_ENTRIES == 1000


def test_load_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("NEARBY_RADIUS_KM", raising=False)
    monkeypatch.delenv("DISTANCE_CACHE_MAX_ENTRIES", raising=False)
    settings = load_settings("api")

    assert settings.DATABASE_URL is None
    assert settings.NEARBY_RADIUS_KM == 5.0
    assert settings.DISTANCE_CACHE_MAX_ENTRIES is None
