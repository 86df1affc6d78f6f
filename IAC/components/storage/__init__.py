"""
Storage components for RDS.

Components:
- RdsMysqlComponent: RDS MySQL database
"""

from IAC.components.storage.rds_mysql import RdsMysqlComponent, RdsOutputs

__all__ = [
    "RdsMysqlComponent",
    "RdsOutputs",
]
