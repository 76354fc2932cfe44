from core.config import Settings


def make_settings(**overrides) -> Settings:
    """Test settings: a fake key, no backoff delay, nothing read from .env."""
    values = {
        "gemini_api_key": "test-key",
        "ai_init_backoff_seconds": 0,
        "environment": "development",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)
