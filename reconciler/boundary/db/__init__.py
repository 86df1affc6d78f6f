"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management
  - DeployedResourceModel, StateSerialModel: Deployed state tables
  - deployed_resource_crud, state_serial_crud: CRUD operation singletons

Dependencies: sqlalchemy, reconciler.configs
System role: Database adapter backing the SQL state store
"""

from reconciler.boundary.db.base import Base, TimestampMixin
from reconciler.boundary.db.connection import get_async_engine, get_async_session_factory
from reconciler.boundary.db.models import (
    STATE_SERIAL_ROW_ID,
    DeployedResourceModel,
    StateSerialModel,
)
from reconciler.boundary.db.CRUD import (
    BaseCRUD,
    DeployedResourceCRUD,
    StateSerialCRUD,
    deployed_resource_crud,
    state_serial_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    # Connection
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "DeployedResourceModel",
    "StateSerialModel",
    "STATE_SERIAL_ROW_ID",
    # CRUD classes
    "BaseCRUD",
    "DeployedResourceCRUD",
    "StateSerialCRUD",
    # CRUD singletons
    "deployed_resource_crud",
    "state_serial_crud",
]
