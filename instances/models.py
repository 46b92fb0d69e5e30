"""Data models for persisted Minecraft instances"""

import weakref
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

if TYPE_CHECKING:
    from .manager import InstanceStore


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ModLoaders(str, Enum):
    """Supported mod loaders"""
    NONE = "none"
    FORGE = "forge"
    FABRIC = "fabric"
    QUILT = "quilt"
    NEOFORGE = "neoforge"


class ModLoaderModel(BaseModel):
    """Mod loader used by an instance"""
    modloader: ModLoaders = ModLoaders.NONE
    version: str = ""


class RAMInfo(BaseModel):
    """JVM heap limits in megabytes"""
    minimum_ram_mb: int = Field(default=4096, gt=0)
    maximum_ram_mb: int = Field(default=4096, gt=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "RAMInfo":
        if self.minimum_ram_mb > self.maximum_ram_mb:
            raise ValueError(
                f"minimum_ram_mb ({self.minimum_ram_mb}) exceeds maximum_ram_mb ({self.maximum_ram_mb})"
            )
        return self


class ModModel(BaseModel):
    """A mod installed in an instance

    Mod sources attach their own metadata, so unknown keys are kept.
    """
    model_config = ConfigDict(extra="allow")

    name: str
    version: Optional[str] = None
    file_name: Optional[str] = None
    download_url: Optional[str] = None
    sha1: Optional[str] = None


class InstanceModel(BaseModel):
    """A named, self-contained game installation configuration

    Attributes:
        id: Unique identifier, fixed at creation
        path: Directory owned by the instance, set by InstanceStore.create
        last_modified: Updated on every save
    """
    id: UUID = Field(default_factory=uuid4, frozen=True)
    name: str
    description: str = ""
    minecraft_version: str = ""
    java_path: str = ""
    window_width: int = Field(default=854, gt=0)
    window_height: int = Field(default=480, gt=0)
    ram: RAMInfo = Field(default_factory=RAMInfo)
    mod_loader: ModLoaderModel = Field(default_factory=ModLoaderModel)
    mods: List[ModModel] = Field(default_factory=list)
    path: Optional[Path] = None
    last_modified: datetime = Field(default_factory=utcnow)

    # Non-owning link back to the store managing this instance
    _store: Optional[weakref.ReferenceType] = PrivateAttr(default=None)

    def attach(self, store: "InstanceStore"):
        self._store = weakref.ref(store)

    @property
    def store(self) -> Optional["InstanceStore"]:
        """Owning store, or None if detached or already collected"""
        return self._store() if self._store is not None else None
