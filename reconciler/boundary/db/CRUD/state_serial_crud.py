"""
State serial CRUD operations.

Dependencies: sqlalchemy, reconciler.boundary.db.models
System role: Read and bump the snapshot version
"""

from sqlalchemy.ext.asyncio import AsyncSession

from reconciler.boundary.db.CRUD.base_crud import BaseCRUD
from reconciler.boundary.db.models.state_serial_model import STATE_SERIAL_ROW_ID, StateSerialModel


class StateSerialCRUD(BaseCRUD[StateSerialModel]):
    """CRUD operations for the single StateSerialModel row."""

    def __init__(self) -> None:
        """Initialize StateSerialCRUD with StateSerialModel."""
        super().__init__(StateSerialModel)

    async def get_serial(self, session: AsyncSession) -> int:
        """
        Current snapshot version.

        Args:
            session: Async database session

        Returns:
            int: Serial, 0 when nothing was ever committed
        """
        row = await self.get_by_key(session, STATE_SERIAL_ROW_ID)
        return row.serial if row is not None else 0

    async def bump(self, session: AsyncSession) -> int:
        """
        Increment the snapshot version inside the caller's transaction.

        Args:
            session: Async database session

        Returns:
            int: New serial
        """
        row = await self.get_by_key(session, STATE_SERIAL_ROW_ID)
        if row is None:
            row = await self.create(session, id=STATE_SERIAL_ROW_ID, serial=1)
            return row.serial
        row.serial += 1
        await session.flush()
        return row.serial


state_serial_crud = StateSerialCRUD()
