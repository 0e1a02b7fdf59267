from app.core.config import Settings


def test_defaults_run_without_redis(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)

    settings = Settings(_env_file=None)

    assert settings.REDIS_URL is None
    assert settings.API_V1_STR == "/api"
    assert settings.MONGODB_URI.get_secret_value().startswith("mongodb://")


def test_cors_origins_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", "http://localhost:3000, https://streamflix.example")

    settings = Settings(_env_file=None)

    assert settings.BACKEND_CORS_ORIGINS == ["http://localhost:3000", "https://streamflix.example"]
