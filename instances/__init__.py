"""Persistence of named Minecraft instance configurations"""

from .exceptions import InstanceError, InstanceNotFoundError
from .manager import InstanceStore, sanitize_directory_name
from .models import InstanceModel, ModLoaderModel, ModLoaders, ModModel, RAMInfo

__all__ = [
    "InstanceStore",
    "InstanceModel",
    "ModModel",
    "ModLoaderModel",
    "ModLoaders",
    "RAMInfo",
    "InstanceError",
    "InstanceNotFoundError",
    "sanitize_directory_name",
]
