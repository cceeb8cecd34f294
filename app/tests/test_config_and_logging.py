import asyncio
import logging

from mongomock_motor import AsyncMongoMockClient
import pytest

from app.config import Settings
from app.logging import configure_logging
from app.scripts.seed_test_events import run_seed


def test_test_data_guard(monkeypatch) -> None:
    monkeypatch.delenv("ALLOW_TEST_DATA", raising=False)

    assert Settings(ENV="development", ALLOW_TEST_DATA=False).test_data_enabled is False
    assert Settings(ENV="development", ALLOW_TEST_DATA=True).test_data_enabled is True
    assert Settings(ENV="Production", ALLOW_TEST_DATA=True).test_data_enabled is False


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("MONGO_DB", "from_env")
    monkeypatch.setenv("ALLOW_TEST_DATA", "true")

    settings = Settings()

    assert settings.MONGO_DB == "from_env"
    assert settings.ALLOW_TEST_DATA is True


def test_configure_logging_quiets_pymongo(monkeypatch) -> None:
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    configure_logging("debug")

    assert logging.getLogger("pymongo").level == logging.WARNING
    assert logging.getLogger("motor").level == logging.WARNING


def test_seed_script_refuses_without_guard() -> None:
    with pytest.raises(SystemExit):
        asyncio.run(run_seed(Settings(ENV="development", ALLOW_TEST_DATA=False), seed=1, anchor=None))


def test_seed_script_resets_events() -> None:
    mongo = AsyncMongoMockClient()
    settings = Settings(ENV="development", ALLOW_TEST_DATA=True)

    stats = asyncio.run(run_seed(settings, seed=1, anchor=None, client=mongo))

    assert stats == {"deleted": 0, "created": 34}
    assert asyncio.run(mongo[settings.MONGO_DB].events.count_documents({"featured": True})) == 16
