"""
==========================
Connection management.
==========================

The Connection Manager sits outside the CRUD core: it opens and closes
backend connections from a config descriptor and hands the core ready-made
DatabaseContext objects. Health checks (availability polling and SQLAlchemy
verification) live alongside it.

Modules:
    database_utils: ConnectionManager, availability checks, SQLAlchemy helpers
"""

__all__ = [
    'ConnectionManager',
    'check_database_available',
    'wait_for_database',
    'verify_connection',
    'get_connection_string',
    'create_sqlalchemy_engine',
]

from .database_utils import (
    ConnectionManager,
    check_database_available,
    create_sqlalchemy_engine,
    get_connection_string,
    verify_connection,
    wait_for_database,
)
