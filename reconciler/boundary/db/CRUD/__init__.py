"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from reconciler.boundary.db.CRUD import deployed_resource_crud

    rows = await deployed_resource_crud.get_all_ordered(session)
"""

from reconciler.boundary.db.CRUD.base_crud import BaseCRUD
from reconciler.boundary.db.CRUD.deployed_resource_crud import (
    DeployedResourceCRUD,
    deployed_resource_crud,
)
from reconciler.boundary.db.CRUD.state_serial_crud import StateSerialCRUD, state_serial_crud

__all__ = [
    "BaseCRUD",
    "DeployedResourceCRUD",
    "deployed_resource_crud",
    "StateSerialCRUD",
    "state_serial_crud",
]
