"""Database models."""

from .base import Base
from .building import Building
from .unit import Unit
from .usage import EnergyUsage
from .user import Role, User

__all__ = [
    "Base",
    "Building",
    "EnergyUsage",
    "Role",
    "Unit",
    "User",
]
