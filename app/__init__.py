"""Events service package."""

from .config import Settings
from .database import Base, Database

__all__ = ["Base", "Database", "Settings"]
