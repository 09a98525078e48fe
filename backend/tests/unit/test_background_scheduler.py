"""
Unit tests for BackgroundScheduler.
"""

from unittest.mock import AsyncMock

import pytest

from chorely.core.config import Settings
from chorely.services.background_scheduler import BackgroundScheduler


def _settings(**overrides) -> Settings:
    return Settings(ENVIRONMENT="test", RECURRENCE_LOOKAHEAD_DAYS=14, **overrides)


@pytest.mark.asyncio
async def test_start_is_disabled_in_test_environment():
    scheduler = BackgroundScheduler(AsyncMock(), _settings())

    await scheduler.start()

    assert scheduler.is_running is False
    await scheduler.stop()


@pytest.mark.asyncio
async def test_run_uses_configured_lookahead():
    recurrence_service = AsyncMock()
    recurrence_service.ensure_upcoming.return_value = {"created_count": 2, "tasks": []}
    scheduler = BackgroundScheduler(recurrence_service, _settings())

    result = await scheduler.run_recurrence_generation()

    assert result == {"created_count": 2, "tasks": []}
    recurrence_service.ensure_upcoming.assert_awaited_once_with(lookahead_days=14)
    assert scheduler.last_run is not None


@pytest.mark.asyncio
async def test_run_swallows_job_failures():
    recurrence_service = AsyncMock()
    recurrence_service.ensure_upcoming.side_effect = RuntimeError("database is locked")
    scheduler = BackgroundScheduler(recurrence_service, _settings())

    assert await scheduler.run_recurrence_generation() is None
    assert scheduler.last_run is None
