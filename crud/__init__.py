"""
==============================================
CRUD execution package.
==============================================

Modules:
    context: DatabaseContext (driver + handle + descriptor + lock)
    executor: StatementExecutor and result normalization
    fillables: Whitelist filtering of input records
    database: Database facade with create/read/update/delete

Example:
    >>> from crud import Database, DatabaseContext
    >>> db = Database(DatabaseContext.open(config.database, backend='sqlite'))
    >>> db.create('users', {'name': 'Ada'})
    True
"""

__version__ = "0.1.0"
__all__ = ['Database', 'DatabaseContext', 'StatementExecutor', 'normalize_rows', 'fillables']

from crud.context import DatabaseContext
from crud.database import Database
from crud.executor import StatementExecutor, normalize_rows
from crud.fillables import fillables
