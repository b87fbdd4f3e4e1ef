"""User Module - Practice profile and engine-maintained counters."""

from dailycode.modules.user.interface import IUserRepository, User

__all__ = [
    "IUserRepository",
    "User",
]
