import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from src.app.services.clock import FixedClock


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-03-10 09:00 business time"""
    return FixedClock(datetime(2024, 3, 10, 9, 0, 0))
