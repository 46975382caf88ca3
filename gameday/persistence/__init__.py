"""
Persistence layer for scheduling data.
No business logic; only read/write interfaces.
"""
from .db import get_connection, get_db_path, init_db, set_db_path
from .repositories import (
    GameRepository,
    SeasonRepository,
    TeamRepository,
)

__all__ = [
    "get_connection",
    "get_db_path",
    "init_db",
    "set_db_path",
    "GameRepository",
    "SeasonRepository",
    "TeamRepository",
]
