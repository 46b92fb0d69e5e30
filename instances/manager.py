"""Directory-backed store of Minecraft instances"""

import logging
import re
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Union
from uuid import UUID

from pydantic import ValidationError

from settings import INSTANCE_FILENAME
from .exceptions import InstanceError, InstanceNotFoundError
from .models import InstanceModel, ModModel, utcnow

logger = logging.getLogger(__name__)

# Characters rejected in file names on at least one supported platform
_ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_directory_name(name: str) -> str:
    """Replace characters that are not legal in a directory name with '-'"""
    dirname = _ILLEGAL_FILENAME_CHARS.sub("-", name).strip().rstrip(".")
    if dirname in ("", ".", ".."):
        dirname = "instance"
    return dirname


class InstanceStore:
    """CRUD manager over a directory of instance.json records

    Each instance lives in its own subdirectory of the root. The store keeps
    an in-memory id -> instance mapping; it does no locking, so a store must
    not be shared between threads or processes writing the same root.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self._instances: Dict[UUID, InstanceModel] = {}
        self.load_all()

    @property
    def instances(self) -> Mapping[UUID, InstanceModel]:
        """Read-only view of the registered instances"""
        return MappingProxyType(self._instances)

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[InstanceModel]:
        return iter(list(self._instances.values()))

    def __contains__(self, instance_id: object) -> bool:
        return instance_id in self._instances

    def create(self, instance: InstanceModel) -> InstanceModel:
        """Register a new instance and allocate its directory

        Returns:
            The same instance with path populated and saved to disk
        """
        if instance.id in self._instances:
            raise InstanceError(f"Instance {instance.id} is already registered")

        instance.attach(self)
        directory = self.root / self._unique_directory_name(instance.name)
        directory.mkdir(parents=True)
        instance.path = directory
        logger.info(f"Created instance '{instance.name}' in {directory}")

        self._instances[instance.id] = instance
        return self.save(instance.id, instance)

    def save(self, instance_id: UUID, instance: InstanceModel) -> InstanceModel:
        """Persist an instance to <path>/instance.json"""
        if instance.id != instance_id:
            raise InstanceError(f"Cannot save instance {instance.id} under id {instance_id}")
        if instance.path is None:
            raise InstanceError(f"Instance {instance_id} has no directory, create it first")

        instance_file = Path(instance.path) / INSTANCE_FILENAME
        logger.debug(f"Saving instance to file: {instance_file}")

        instance.attach(self)
        now = utcnow()
        instance.last_modified = max(now, instance.last_modified) if instance.last_modified.tzinfo else now
        self._instances[instance_id] = instance
        instance_file.write_text(instance.model_dump_json(indent=2), encoding="utf-8")
        return instance

    def load_all(self):
        """Reload every instance.json found under the root

        Unreadable files are logged and skipped.
        """
        self._instances.clear()
        for instance_file in sorted(self.root.rglob(INSTANCE_FILENAME)):
            if not instance_file.is_file():
                continue
            logger.debug(f"Attempting to load instance from file: {instance_file}")
            try:
                instance = self._read(instance_file)
            except (OSError, UnicodeDecodeError, ValidationError) as e:
                logger.error(f"Failed to load instance file {instance_file}: {e}")
                continue

            if instance.id in self._instances:
                logger.error(
                    f"Skipping {instance_file}: id {instance.id} already loaded from {self._instances[instance.id].path}"
                )
                continue

            self._instances[instance.id] = instance
            logger.debug(f"Successfully loaded instance from file: {instance_file}")

        logger.info(f"Loaded {len(self._instances)} instance(s) from {self.root}")

    def load_one(self, path: Union[str, Path]) -> Optional[InstanceModel]:
        """Load the instance stored in a single directory

        Returns:
            The registered instance, or None if the directory has no instance.json

        Raises:
            InstanceError: If the file exists but cannot be parsed
        """
        instance_file = Path(path) / INSTANCE_FILENAME
        if not instance_file.is_file():
            return None

        try:
            instance = self._read(instance_file)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            raise InstanceError(f"Failed to load instance file {instance_file}: {e}") from e

        self._instances[instance.id] = instance
        return instance

    def add_mod(self, instance: InstanceModel, mod: ModModel) -> InstanceModel:
        """Append a mod to an instance and save it"""
        instance.mods = [*instance.mods, mod]
        return self.save(instance.id, instance)

    def by_name(self, name: str) -> List[InstanceModel]:
        return [i for i in self._instances.values() if i.name == name]

    def first_by_name(self, name: str) -> InstanceModel:
        for instance in self._instances.values():
            if instance.name == name:
                return instance
        raise InstanceNotFoundError(name)

    def by_id(self, instance_id: UUID) -> InstanceModel:
        try:
            return self._instances[instance_id]
        except KeyError:
            raise InstanceNotFoundError(instance_id) from None

    def exists(self, name: str) -> bool:
        return any(i.name == name for i in self._instances.values())

    def _read(self, instance_file: Path) -> InstanceModel:
        instance = InstanceModel.model_validate_json(instance_file.read_text(encoding="utf-8"))
        # The directory on disk wins over a stale recorded path
        instance.path = instance_file.parent
        instance.attach(self)
        return instance

    def _unique_directory_name(self, name: str) -> str:
        dirname = sanitize_directory_name(name)
        existing = {entry.name.casefold() for entry in self.root.iterdir()}

        index = 0
        candidate = dirname
        while candidate.casefold() in existing:
            index += 1
            candidate = f"{dirname} ({index})"
        return candidate
