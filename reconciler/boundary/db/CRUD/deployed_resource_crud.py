"""
Deployed resource CRUD operations.

Adds ordered listing and upsert on top of the generic CRUD.

Dependencies: sqlalchemy, reconciler.boundary.db.models
System role: Row-level persistence for deployed resources
"""

from typing import Any, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.boundary.db.CRUD.base_crud import BaseCRUD
from reconciler.boundary.db.models.deployed_resource_model import DeployedResourceModel


class DeployedResourceCRUD(BaseCRUD[DeployedResourceModel]):
    """CRUD operations for DeployedResourceModel."""

    def __init__(self) -> None:
        """Initialize DeployedResourceCRUD with DeployedResourceModel."""
        super().__init__(DeployedResourceModel)

    async def get_all_ordered(self, session: AsyncSession) -> Sequence[DeployedResourceModel]:
        """
        Retrieve every deployed resource in insertion order.

        Args:
            session: Async database session

        Returns:
            Sequence of DeployedResourceModels ordered by sequence
        """
        stmt = select(DeployedResourceModel).order_by(
            DeployedResourceModel.sequence,
            DeployedResourceModel.logical_id,
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def upsert(
        self,
        session: AsyncSession,
        logical_id: str,
        **values: Any,
    ) -> DeployedResourceModel:
        """
        Insert or overwrite the row for a logical id.

        An existing row keeps its sequence so the snapshot order is stable
        across updates and replacements.

        Args:
            session: Async database session
            logical_id: Row key
            **values: Column values other than logical_id and sequence

        Returns:
            The stored model instance
        """
        existing = await self.get_by_key(session, logical_id)
        if existing is not None:
            for field, value in values.items():
                setattr(existing, field, value)
            await session.flush()
            return existing

        next_sequence = await session.scalar(
            select(func.coalesce(func.max(DeployedResourceModel.sequence), 0))
        )
        return await self.create(
            session,
            logical_id=logical_id,
            sequence=(next_sequence or 0) + 1,
            **values,
        )


deployed_resource_crud = DeployedResourceCRUD()
