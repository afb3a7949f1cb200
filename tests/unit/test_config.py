"""Unit tests for settings parsing."""

import pytest
from libs.common.config import Settings
from pydantic import ValidationError


def _settings(**overrides) -> Settings:
    overrides.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
    return Settings(_env_file=None, **overrides)


@pytest.mark.unit
def test_page_size_defaults():
    settings = _settings()

    assert settings.DEFAULT_PAGE_SIZE == 10
    assert settings.MAX_PAGE_SIZE == 50


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"MAX_PAGE_SIZE": 80},
        {"MAX_PAGE_SIZE": 0},
        {"DEFAULT_PAGE_SIZE": 51},
    ],
)
def test_page_size_is_capped_at_fifty(overrides):
    with pytest.raises(ValidationError):
        _settings(**overrides)


@pytest.mark.unit
def test_postgres_url_gets_async_driver():
    settings = _settings(DATABASE_URL="postgresql://rentride@localhost/rentride")

    assert settings.DATABASE_URL == "postgresql+psycopg://rentride@localhost/rentride"
