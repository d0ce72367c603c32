"""Fixtures for repository tests."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.repositories.base_repository import BaseRepository

from .models import Widget

# NOTE: All fixtures in this file depend on the `db_session` fixture defined in conftest.py


@pytest.fixture
async def widget_repository(db_session: AsyncSession) -> BaseRepository[Widget]:
    """BaseRepository bound to the Widget model and the test session."""
    return BaseRepository(Widget, db_session)


@pytest.fixture
def sample_widget_data() -> dict:
    """Deterministic payload shared by many tests. Does not touch the DB."""
    return {"sku": "W-001", "name": "Sprocket", "quantity": 3}


@pytest.fixture
def make_widget():
    """
    Factory for transient widgets (id is None) with unique defaults.

    Usage:
        widget = make_widget(name="bolt")
    """
    def _make(**overrides) -> Widget:
        data = {
            "sku": f"W-{uuid.uuid4().hex[:8]}",
            "name": "widget",
            "quantity": 1,
        }
        data.update(overrides)
        return Widget(**data)

    return _make


@pytest.fixture
async def create_widget(widget_repository: BaseRepository[Widget], make_widget):
    """
    Factory persisting widgets through the repository.

    Usage:
        widget = await create_widget(name="bolt")
    """
    async def _create(**overrides) -> Widget:
        return await widget_repository.save(make_widget(**overrides))

    return _create


@pytest.fixture
async def created_widget(create_widget, sample_widget_data) -> Widget:
    return await create_widget(**sample_widget_data)


@pytest.fixture
async def multiple_widgets(create_widget) -> list[Widget]:
    """Three persisted widgets with distinct values, in insertion order."""
    return [await create_widget(name=f"widget_{idx}") for idx in range(3)]
