"""Storage domain - database, transactions and statement building."""

# Database
from tagstore.storage.database import (
    ConnectionProvider,
    get_db,
    get_db_path,
    set_db_path,
    get_engine,
    reset_engine,
    init_db,
    reset_db,
    get_table_stats,
)

# Transactions
from tagstore.storage.transaction import TransactionManager

# Statements
from tagstore.storage.query_builder import (
    build_delete,
    build_insert,
    build_select,
    build_update,
    check_identifier,
    project_columns,
)

__all__ = [
    # Database
    "ConnectionProvider",
    "get_db",
    "get_db_path",
    "set_db_path",
    "get_engine",
    "reset_engine",
    "init_db",
    "reset_db",
    "get_table_stats",
    # Transactions
    "TransactionManager",
    # Statements
    "build_select",
    "build_insert",
    "build_update",
    "build_delete",
    "check_identifier",
    "project_columns",
]
