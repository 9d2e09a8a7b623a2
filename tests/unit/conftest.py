import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def recorded_sleeps():
    """Delays passed to the injected sleep primitive"""
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps):
    """Non-blocking sleep that only records the requested delay"""
    async def _sleep(delay):
        recorded_sleeps.append(delay)
    return _sleep
