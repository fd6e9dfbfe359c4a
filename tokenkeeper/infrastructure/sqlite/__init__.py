from .database import SQLiteDatabase
from .tokens import SQLiteTokenStore

__all__ = [
    "SQLiteDatabase",
    "SQLiteTokenStore",
]
