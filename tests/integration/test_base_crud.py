"""
Test suite for BaseCRUD generic database operations.

Tests the key-based operations the state store relies on: create, get and delete.
Uses async fixtures with SQLAlchemy mocking to verify correct query behavior.

System role: Verification of generic database layer foundation
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.boundary.db.CRUD.base_crud import BaseCRUD
from reconciler.boundary.db.models import DeployedResourceModel, StateSerialModel


@pytest.fixture
def base_crud() -> BaseCRUD:
    """Provide BaseCRUD instance for testing."""
    return BaseCRUD(DeployedResourceModel)


@pytest.fixture
def mock_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def sample_key() -> str:
    """Provide sample logical id for testing."""
    return "AppVpc"


class TestBaseCRUDInit:
    """Test suite for primary key discovery."""

    def test_key_should_be_model_primary_key(self) -> None:
        assert BaseCRUD(DeployedResourceModel).key is DeployedResourceModel.logical_id
        assert BaseCRUD(StateSerialModel).key is StateSerialModel.id


class TestBaseCRUDCreate:
    """Test suite for BaseCRUD.create() method."""

    @pytest.mark.asyncio
    async def test_create_should_add_instance_to_session(
        self, base_crud: BaseCRUD, mock_session: AsyncSession
    ) -> None:
        """Test create adds instance and flushes/refreshes."""
        # Arrange
        mock_session.flush = AsyncMock()
        mock_session.refresh = AsyncMock()

        # Act
        instance = await base_crud.create(mock_session, logical_id="A", physical_id="vpc-1", kind="network")

        # Assert
        mock_session.add.assert_called_once_with(instance)
        mock_session.flush.assert_called_once()
        mock_session.refresh.assert_called_once_with(instance)
        assert instance.logical_id == "A"

    @pytest.mark.asyncio
    async def test_create_should_flush_before_refresh(
        self, base_crud: BaseCRUD, mock_session: AsyncSession
    ) -> None:
        """Test flush is called before refresh so column defaults are populated."""
        # Arrange
        call_order = []

        async def flush_effect() -> None:
            call_order.append("flush")

        async def refresh_effect(obj: Any) -> None:
            call_order.append("refresh")

        mock_session.flush = AsyncMock(side_effect=flush_effect)
        mock_session.refresh = AsyncMock(side_effect=refresh_effect)

        # Act
        await base_crud.create(mock_session, logical_id="A")

        # Assert
        assert call_order == ["flush", "refresh"]


class TestBaseCRUDGetByKey:
    """Test suite for BaseCRUD.get_by_key() method."""

    @pytest.mark.asyncio
    async def test_get_by_key_should_return_model_when_found(
        self, base_crud: BaseCRUD, mock_session: AsyncSession, sample_key: str
    ) -> None:
        """Test get_by_key returns model instance when key exists."""
        # Arrange
        mock_instance = MagicMock()
        mock_instance.logical_id = sample_key
        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=mock_instance)
        mock_session.execute = AsyncMock(return_value=mock_result)

        # Act
        result = await base_crud.get_by_key(mock_session, sample_key)

        # Assert
        assert result == mock_instance
        mock_session.execute.assert_called_once()

    @pytest.mark.asyncio
    async def test_get_by_key_should_return_none_when_not_found(
        self, base_crud: BaseCRUD, mock_session: AsyncSession, sample_key: str
    ) -> None:
        """Test get_by_key returns None when key doesn't exist."""
        # Arrange
        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=None)
        mock_session.execute = AsyncMock(return_value=mock_result)

        # Act
        result = await base_crud.get_by_key(mock_session, sample_key)

        # Assert
        assert result is None

    @pytest.mark.asyncio
    async def test_get_by_key_should_filter_on_primary_key(
        self, base_crud: BaseCRUD, mock_session: AsyncSession, sample_key: str
    ) -> None:
        """Test get_by_key builds a WHERE clause on the primary key column."""
        # Arrange
        mock_result = MagicMock()
        mock_result.scalar_one_or_none = MagicMock(return_value=None)
        mock_session.execute = AsyncMock(return_value=mock_result)

        # Act
        await base_crud.get_by_key(mock_session, sample_key)

        # Assert
        statement = mock_session.execute.call_args[0][0]
        assert "deployed_resources.logical_id" in str(statement)


class TestBaseCRUDDeleteByKey:
    """Test suite for BaseCRUD.delete_by_key() method."""

    @pytest.mark.asyncio
    async def test_delete_by_key_should_return_true_when_deleted(
        self, base_crud: BaseCRUD, mock_session: AsyncSession, sample_key: str
    ) -> None:
        """Test delete_by_key returns True when record is deleted."""
        # Arrange
        mock_result = MagicMock()
        mock_result.rowcount = 1
        mock_session.execute = AsyncMock(return_value=mock_result)

        # Act
        result = await base_crud.delete_by_key(mock_session, sample_key)

        # Assert
        assert result is True

    @pytest.mark.asyncio
    async def test_delete_by_key_should_return_false_when_not_found(
        self, base_crud: BaseCRUD, mock_session: AsyncSession, sample_key: str
    ) -> None:
        """Test delete_by_key returns False when record doesn't exist."""
        mock_result = MagicMock()
        mock_result.rowcount = 0
        mock_session.execute = AsyncMock(return_value=mock_result)

        result = await base_crud.delete_by_key(mock_session, sample_key)

        assert result is False
