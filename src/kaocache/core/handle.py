"""Cache handle: the coordinates of one identifier inside a cache root."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from kaocache.core.hasher import IdentifierHasher
from kaocache.shared.constants import CacheLayout
from kaocache.shared.types import DataKind


@dataclass(frozen=True)
class CacheHandle:
    """Identifier bound to a data kind and a cache root.

    A handle owns no resources. It only derives paths; the file system is
    the system of record.

    Attributes:
        identifier: Caller-supplied identifier
        identifier_hash: Directory-safe hash of the identifier
        data_kind: Serialization of the content cached under this handle
        root_dir: Absolute cache root
    """

    identifier: str
    identifier_hash: str
    data_kind: DataKind
    root_dir: Path

    @classmethod
    def create(
        cls,
        identifier: str,
        data_kind: DataKind | str,
        root_dir: Path,
        hasher: IdentifierHasher,
    ) -> CacheHandle:
        """Build a handle, validating the data kind first.

        Raises:
            DataKindInvalidError: If data_kind is not supported
        """
        kind = DataKind.parse(data_kind)
        return cls(
            identifier=identifier,
            identifier_hash=hasher.hash(identifier),
            data_kind=kind,
            root_dir=Path(root_dir),
        )

    @property
    def files_dir(self) -> Path:
        return self.root_dir / CacheLayout.FILES_DIR

    @property
    def generation_dir(self) -> Path:
        """Directory holding every generation of this identifier."""
        return self.files_dir / self.identifier_hash

    @property
    def pointer_path(self) -> Path:
        """Location of the current-pointer file."""
        return self.root_dir / f"{self.identifier_hash}{CacheLayout.POINTER_SUFFIX}"

    def generation_path(self, file_name: str) -> Path:
        return self.generation_dir / file_name

    def reference(self, path: Path, *, relative: bool) -> Path:
        """Return ``path`` relative to the cache root or unchanged."""
        if relative:
            return path.relative_to(self.root_dir)
        return path
