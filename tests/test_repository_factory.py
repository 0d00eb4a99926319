"""Database-target switching and diagnostics."""

import pytest

from propertypulse_backend.core.exceptions import ConfigurationError
from propertypulse_backend.core.repository_factory import (
    HEALTH_HISTORY_SIZE,
    DatabaseTarget,
    RepositoryFactory,
)


@pytest.fixture
async def sql_factory(settings):
    factory = RepositoryFactory(settings)
    await factory.start()
    yield factory
    await factory.close()


async def test_switch_changes_active_target(sql_factory):
    assert sql_factory.active_target == DatabaseTarget.POSTGRES

    result = await sql_factory.switch_database("json")
    assert result["success"] is True
    assert result["previous_target"] == "postgres"
    assert result["current_target"] == "json"
    assert sql_factory.active_target == DatabaseTarget.JSON


async def test_switch_to_active_target_is_a_no_op(sql_factory):
    result = await sql_factory.switch_database(DatabaseTarget.POSTGRES)
    assert result["message"] == "Already using postgres"
    assert sql_factory.active_target == DatabaseTarget.POSTGRES


async def test_captured_repository_keeps_its_backend(sql_factory):
    users = sql_factory.users()
    created = await users.create(
        {"email": "kept@example.com", "first_name": "K", "last_name": "Ept", "password": "secret-pass"}
    )

    await sql_factory.switch_database("json")

    assert await users.find_by_id(created.id) is not None
    assert await sql_factory.users().find_by_id(created.id) is None


async def test_each_target_holds_its_own_data(sql_factory):
    await sql_factory.switch_database("json")
    await sql_factory.users().create(
        {"email": "doc@example.com", "first_name": "D", "last_name": "Oc"}
    )
    await sql_factory.switch_database("postgres")
    assert await sql_factory.users().find_by_email("doc@example.com") is None
    await sql_factory.switch_database("json")
    assert await sql_factory.users().find_by_email("doc@example.com") is not None


async def test_unknown_target_is_rejected(sql_factory):
    with pytest.raises(ConfigurationError) as exc_info:
        await sql_factory.switch_database("mongodb")
    assert exc_info.value.details["available"] == ["postgres", "json"]
    assert sql_factory.active_target == DatabaseTarget.POSTGRES


def test_unconfigured_target_is_rejected(settings):
    settings = settings.model_copy(update={"document_store_enabled": False})
    with pytest.raises(ConfigurationError):
        RepositoryFactory(settings.model_copy(update={"database_target": "json"}))

    factory = RepositoryFactory(settings)
    assert factory.configured_targets == [DatabaseTarget.POSTGRES]


def test_unknown_repository_name(settings):
    with pytest.raises(ConfigurationError):
        RepositoryFactory(settings).get("invoices")


async def test_health_check_reports_every_target(sql_factory):
    report = await sql_factory.health_check()
    assert report["status"] == "healthy"
    assert report["active_target"] == "postgres"
    assert set(report["targets"]) == {"postgres", "json"}
    assert report["targets"]["postgres"]["status"] == "healthy"
    assert "response_time_ms" in report["targets"]["json"]


async def test_health_check_unreachable_database(settings):
    broken = settings.model_copy(
        update={
            "database_url": "sqlite+aiosqlite:////nonexistent-dir/nested/pulse.db",
            "database_create_tables": False,
        }
    )
    factory = RepositoryFactory(broken)
    try:
        report = await factory.health_check()
    finally:
        await factory.close()
    assert report["status"] == "unhealthy"
    assert "error" in report["targets"]["postgres"]
    assert report["targets"]["json"]["status"] == "healthy"


async def test_health_history_is_bounded(sql_factory):
    assert sql_factory.health_history()["current_status"] is None

    for _ in range(HEALTH_HISTORY_SIZE + 3):
        await sql_factory.health_check()

    history = sql_factory.health_history()
    assert len(history["history"]) == HEALTH_HISTORY_SIZE
    assert history["current_status"] == history["history"][-1]
    assert history["current_status"]["target"] == "postgres"


async def test_database_info(sql_factory):
    info = sql_factory.database_info()
    assert info["active_target"] == "postgres"
    assert info["configured_targets"] == ["postgres", "json"]
    assert "feedback" in info["repositories"]
    assert len(info["repositories"]) == 9
