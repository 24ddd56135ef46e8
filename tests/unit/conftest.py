"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests, and clears the settings variables most likely to be set
in a developer shell. Tests control config exclusively through
monkeypatch.setenv().
"""

import pytest

_PROJECT_ENV_VARS = (
    "ENV",
    "JWT_SECRET",
    "JWT_PRIVATE_KEY",
    "JWT_PUBLIC_KEY",
    "REDIS_URI",
    "SENTRY_DSN",
)


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})
    for var in _PROJECT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
