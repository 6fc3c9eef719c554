"""Database subsystem for MOS Drones.

Public API::

    from mosdrones.db import init_database, UnitOfWork
"""

from mosdrones.db.init import init_database
from mosdrones.db.unit_of_work import UnitOfWork

__all__ = [
    "UnitOfWork",
    "init_database",
]
