"""IdentityGate database layer."""

from identitygate.db.base import Base, close_db, get_session, init_db
from identitygate.db.tables import RoleTable, UserTable

__all__ = [
    "Base",
    "close_db",
    "get_session",
    "init_db",
    "RoleTable",
    "UserTable",
]
