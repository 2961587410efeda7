"""Infra layer utilities (storage, UA selection)."""

from .storage import SQLiteManager
from .ua_pool import UserAgentPool

__all__ = ["SQLiteManager", "UserAgentPool"]
